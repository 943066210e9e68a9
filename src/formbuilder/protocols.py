from __future__ import annotations

from typing import Any, Protocol


class FormRepository(Protocol):
    def create_form(self, owner_id: str, name: str, description: str) -> int: ...

    def list_forms(self, owner_id: str) -> list[dict[str, Any]]: ...

    def get_form(self, owner_id: str, form_id: int) -> dict[str, Any] | None: ...

    def get_form_by_share_url(self, share_url: str) -> dict[str, Any] | None: ...

    def get_published_form(self, share_url: str) -> dict[str, Any] | None: ...

    def update_form_content(
        self, owner_id: str, form_id: int, content: list[dict[str, Any]]
    ) -> bool: ...

    def publish_form(self, owner_id: str, form_id: int) -> bool: ...

    def submit_form(
        self, share_url: str, content: dict[str, str]
    ) -> dict[str, Any] | None: ...

    def aggregate_stats(self, owner_id: str) -> dict[str, int]: ...


class SubmissionRepository(Protocol):
    def list_submissions(self, form_id: int) -> list[dict[str, Any]]: ...


class Storage(Protocol):
    forms: FormRepository
    submissions: SubmissionRepository
