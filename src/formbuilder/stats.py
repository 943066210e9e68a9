from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


def compute_submission_rate(visits: int, submissions: int) -> float:
    if visits > 0:
        return submissions / visits * 100
    return 0


def compute_bounce_rate(visits: int, submissions: int) -> float:
    return 100 - compute_submission_rate(visits, submissions)


@dataclass(frozen=True)
class FormStats:
    visits: int
    submissions: int
    submission_rate: float
    bounce_rate: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_stats(visits: int | None, submissions: int | None) -> FormStats:
    visits = visits or 0
    submissions = submissions or 0
    return FormStats(
        visits=visits,
        submissions=submissions,
        submission_rate=compute_submission_rate(visits, submissions),
        bounce_rate=compute_bounce_rate(visits, submissions),
    )
