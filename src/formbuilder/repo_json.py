from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from filelock import FileLock
from tinydb import Query, TinyDB
from tinydb.middlewares import CachingMiddleware
from tinydb.operations import increment
from tinydb.storages import JSONStorage as TinyJSONStorage
from tinydb.table import Document

from formbuilder.utils import new_share_token, now_utc, parse_dt, to_iso


def _submission_from_record(record: Document) -> dict[str, Any]:
    return {
        "id": record.doc_id,
        "form_id": record["form_id"],
        "content": record.get("content", {}),
        "created_at": parse_dt(record.get("created_at")),
    }


def _sorted_submissions(db: TinyDB, form_id: int) -> list[dict[str, Any]]:
    items = db.table("submissions").search(Query().form_id == form_id)
    submissions = [_submission_from_record(item) for item in items]
    return sorted(submissions, key=lambda x: (x["created_at"], x["id"]))


class JSONRepoBase:
    def __init__(self, path: Path, lock: FileLock) -> None:
        self._path = path
        self._lock = lock

    @contextmanager
    def _db(self) -> Iterator[TinyDB]:
        with self._lock:
            db = TinyDB(self._path)
            try:
                yield db
            finally:
                db.close()

    @contextmanager
    def _transaction(self) -> Iterator[TinyDB]:
        """Buffer the writes of the block and flush them to the file together.

        When the block raises, the buffered writes are dropped.
        """
        with self._lock:
            db = TinyDB(self._path, storage=CachingMiddleware(TinyJSONStorage))
            try:
                yield db
            except BaseException:
                db.storage.storage.close()
                raise
            db.close()


class JSONFormRepo(JSONRepoBase):
    def create_form(self, owner_id: str, name: str, description: str) -> int:
        record = {
            "owner_id": owner_id,
            "name": name,
            "description": description,
            "content": [],
            "share_url": new_share_token(),
            "published": False,
            "visits": 0,
            "submissions": 0,
            "created_at": to_iso(now_utc()),
        }
        with self._db() as db:
            return db.table("forms").insert(record)

    def list_forms(self, owner_id: str) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("forms").search(Query().owner_id == owner_id)
        forms = [self._from_record(item) for item in items]
        return sorted(forms, key=lambda x: (x["created_at"], x["id"]))

    def get_form(self, owner_id: str, form_id: int) -> dict[str, Any] | None:
        with self._db() as db:
            item = self._owned(db, owner_id, form_id)
        return self._from_record(item) if item else None

    def get_form_by_share_url(self, share_url: str) -> dict[str, Any] | None:
        form = Query()
        with self._db() as db:
            table = db.table("forms")
            updated = table.update(
                increment("visits"),
                (form.share_url == share_url) & (form.published == True),  # noqa: E712
            )
            if not updated:
                return None
            item = table.get(doc_id=updated[0])
        return self._from_record(item) if item else None

    def get_published_form(self, share_url: str) -> dict[str, Any] | None:
        form = Query()
        with self._db() as db:
            item = db.table("forms").get(
                (form.share_url == share_url) & (form.published == True)  # noqa: E712
            )
        return self._from_record(item) if item else None

    def update_form_content(
        self, owner_id: str, form_id: int, content: list[dict[str, Any]]
    ) -> bool:
        with self._db() as db:
            if not self._owned(db, owner_id, form_id):
                return False
            db.table("forms").update({"content": content}, doc_ids=[form_id])
        return True

    def publish_form(self, owner_id: str, form_id: int) -> bool:
        with self._db() as db:
            if not self._owned(db, owner_id, form_id):
                return False
            db.table("forms").update({"published": True}, doc_ids=[form_id])
        return True

    def submit_form(self, share_url: str, content: dict[str, str]) -> dict[str, Any] | None:
        form = Query()
        with self._transaction() as db:
            table = db.table("forms")
            item = table.get((form.share_url == share_url) & (form.published == True))  # noqa: E712
            if not item:
                return None
            record = {
                "form_id": item.doc_id,
                "content": content,
                "created_at": to_iso(now_utc()),
            }
            submission_id = db.table("submissions").insert(record)
            table.update(increment("submissions"), doc_ids=[item.doc_id])
        return _submission_from_record(Document(record, doc_id=submission_id))

    def aggregate_stats(self, owner_id: str) -> dict[str, int]:
        with self._db() as db:
            items = db.table("forms").search(Query().owner_id == owner_id)
        return {
            "visits": sum(item.get("visits", 0) for item in items),
            "submissions": sum(item.get("submissions", 0) for item in items),
        }

    @staticmethod
    def _owned(db: TinyDB, owner_id: str, form_id: int) -> Document | None:
        try:
            item = db.table("forms").get(doc_id=int(form_id))
        except (TypeError, ValueError):
            return None
        if not item or item.get("owner_id") != owner_id:
            return None
        return item

    @staticmethod
    def _from_record(record: Document) -> dict[str, Any]:
        return {
            "id": record.doc_id,
            "owner_id": record["owner_id"],
            "name": record["name"],
            "description": record.get("description", ""),
            "content": record.get("content", []),
            "share_url": record["share_url"],
            "published": bool(record.get("published", False)),
            "visits": record.get("visits", 0),
            "submissions": record.get("submissions", 0),
            "created_at": parse_dt(record.get("created_at")),
        }


class JSONSubmissionRepo(JSONRepoBase):
    def list_submissions(self, form_id: int) -> list[dict[str, Any]]:
        with self._db() as db:
            return _sorted_submissions(db, form_id)


class JSONStorage:
    def __init__(self, path: Path) -> None:
        self._lock = FileLock(f"{path}.lock")
        self.forms = JSONFormRepo(path, self._lock)
        self.submissions = JSONSubmissionRepo(path, self._lock)

    def dispose(self) -> None:
        return None
