from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, func, update
from sqlalchemy.orm import sessionmaker

from formbuilder.models import Base, FormModel, SubmissionModel
from formbuilder.utils import dumps_json, loads_json, new_share_token, now_utc


def _submission_to_dict(row: SubmissionModel) -> dict[str, Any]:
    return {
        "id": row.id,
        "form_id": row.form_id,
        "content": loads_json(row.content) or {},
        "created_at": row.created_at,
    }


class SQLiteFormRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def create_form(self, owner_id: str, name: str, description: str) -> int:
        with self._Session() as session:
            row = FormModel(
                owner_id=owner_id,
                name=name,
                description=description,
                content=dumps_json([]),
                share_url=new_share_token(),
                published=False,
                visits=0,
                submissions=0,
                created_at=now_utc(),
            )
            session.add(row)
            session.commit()
            return row.id

    def list_forms(self, owner_id: str) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = (
                session.query(FormModel)
                .filter(FormModel.owner_id == owner_id)
                .order_by(FormModel.created_at.asc(), FormModel.id.asc())
                .all()
            )
            return [self._to_dict(row) for row in rows]

    def get_form(self, owner_id: str, form_id: int) -> dict[str, Any] | None:
        with self._Session() as session:
            row = (
                session.query(FormModel)
                .filter(FormModel.id == form_id, FormModel.owner_id == owner_id)
                .first()
            )
            return self._to_dict(row) if row else None

    def get_form_by_share_url(self, share_url: str) -> dict[str, Any] | None:
        with self._Session() as session:
            result = session.execute(
                update(FormModel)
                .where(FormModel.share_url == share_url, FormModel.published.is_(True))
                .values(visits=FormModel.visits + 1)
            )
            if result.rowcount == 0:
                session.rollback()
                return None
            session.commit()
            row = session.query(FormModel).filter(FormModel.share_url == share_url).first()
            return self._to_dict(row) if row else None

    def get_published_form(self, share_url: str) -> dict[str, Any] | None:
        with self._Session() as session:
            row = (
                session.query(FormModel)
                .filter(FormModel.share_url == share_url, FormModel.published.is_(True))
                .first()
            )
            return self._to_dict(row) if row else None

    def update_form_content(
        self, owner_id: str, form_id: int, content: list[dict[str, Any]]
    ) -> bool:
        with self._Session() as session:
            result = session.execute(
                update(FormModel)
                .where(FormModel.id == form_id, FormModel.owner_id == owner_id)
                .values(content=dumps_json(content))
            )
            session.commit()
            return result.rowcount > 0

    def publish_form(self, owner_id: str, form_id: int) -> bool:
        with self._Session() as session:
            result = session.execute(
                update(FormModel)
                .where(FormModel.id == form_id, FormModel.owner_id == owner_id)
                .values(published=True)
            )
            session.commit()
            return result.rowcount > 0

    def submit_form(self, share_url: str, content: dict[str, str]) -> dict[str, Any] | None:
        with self._Session() as session:
            form_id = (
                session.query(FormModel.id)
                .filter(FormModel.share_url == share_url, FormModel.published.is_(True))
                .scalar()
            )
            if form_id is None:
                return None
            session.execute(
                update(FormModel)
                .where(FormModel.id == form_id)
                .values(submissions=FormModel.submissions + 1)
            )
            row = SubmissionModel(
                form_id=form_id,
                content=dumps_json(content),
                created_at=now_utc(),
            )
            session.add(row)
            session.commit()
            return _submission_to_dict(row)

    def aggregate_stats(self, owner_id: str) -> dict[str, int]:
        with self._Session() as session:
            visits, submissions = (
                session.query(
                    func.coalesce(func.sum(FormModel.visits), 0),
                    func.coalesce(func.sum(FormModel.submissions), 0),
                )
                .filter(FormModel.owner_id == owner_id)
                .one()
            )
            return {"visits": int(visits), "submissions": int(submissions)}

    @staticmethod
    def _to_dict(row: FormModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "owner_id": row.owner_id,
            "name": row.name,
            "description": row.description or "",
            "content": loads_json(row.content) or [],
            "share_url": row.share_url,
            "published": bool(row.published),
            "visits": row.visits or 0,
            "submissions": row.submissions or 0,
            "created_at": row.created_at,
        }


class SQLiteSubmissionRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_submissions(self, form_id: int) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = (
                session.query(SubmissionModel)
                .filter(SubmissionModel.form_id == form_id)
                .order_by(SubmissionModel.created_at.asc(), SubmissionModel.id.asc())
                .all()
            )
            return [_submission_to_dict(row) for row in rows]


class SQLiteStorage:
    def __init__(self, db_path: Path) -> None:
        self._engine = create_engine(f"sqlite:///{db_path}", future=True)
        self._Session = sessionmaker(self._engine, expire_on_commit=False)
        Base.metadata.create_all(self._engine)
        self.forms = SQLiteFormRepo(self._Session)
        self.submissions = SQLiteSubmissionRepo(self._Session)

    def dispose(self) -> None:
        self._engine.dispose()
