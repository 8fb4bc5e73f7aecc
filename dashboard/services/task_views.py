"""Filtering for task listings, matching the dashboard table's filters."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, TypeVar

from dashboard_shared.schemas.common import TaskStatus
from dashboard_shared.schemas.tasks import TaskRead, TaskWithAssignee

RowT = TypeVar("RowT", bound=TaskRead)


def _searchable_text(row: TaskRead) -> Iterable[str]:
    yield row.title
    if row.description:
        yield row.description
    yield row.status.value
    if isinstance(row, TaskWithAssignee) and row.assigned_to.name:
        yield row.assigned_to.name


def filter_task_rows(
    rows: Sequence[RowT],
    title: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    query: Optional[str] = None,
) -> list[RowT]:
    """Keep rows matching every given filter. Order is preserved.

    title: case-insensitive substring of the title
    status: exact status
    query: case-insensitive substring of any visible column
    """
    title_needle = title.strip().lower() if title else ""
    query_needle = query.strip().lower() if query else ""

    kept = []
    for row in rows:
        if title_needle and title_needle not in row.title.lower():
            continue
        if status is not None and row.status != status:
            continue
        if query_needle and not any(
            query_needle in text.lower() for text in _searchable_text(row)
        ):
            continue
        kept.append(row)
    return kept
