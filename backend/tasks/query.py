# tasks/query.py
"""
Task Query Engine
=================

Translates optional filter/sort parameters into an ORM query and returns
an ordered list of tasks.

Contract:
---------
- Supplied filters AND together; absent or empty parameters are ignored.
- ``status`` and ``priority`` are exact matches and must be valid enum
  values; anything else is a ValidationError, never an empty result.
- ``category`` is a case-insensitive substring match.
- One sort field. Ties are always broken by creation order (oldest first),
  whatever the requested direction, so output is deterministic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from django.db.models import Case, F, IntegerField, QuerySet, Value, When

from api.exceptions import ValidationError

from .models import Priority, Status, Task

logger = logging.getLogger(__name__)


SORT_ASC = 'asc'
SORT_DESC = 'desc'

DEFAULT_SORT_BY = 'createdAt'
DEFAULT_SORT_ORDER = SORT_DESC

# Public sort key -> model column
SORT_FIELDS = {
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
    'dueDate': 'due_date',
    'title': 'title',
    'category': 'category',
    'estimatedDuration': 'estimated_duration',
    'priority': 'priority',
    'status': 'status',
}

# Enum columns sort by rank rather than alphabetically
RANKED_FIELDS = {
    'priority': list(Priority.values),
    'status': list(Status.values),
}

NULLABLE_FIELDS = {'due_date', 'estimated_duration'}


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class FilterSpec:
    status: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER

    def __post_init__(self) -> None:
        if self.status is not None and self.status not in Status.values:
            raise ValidationError(
                f"Invalid status '{self.status}'. "
                f"Expected one of: {', '.join(Status.values)}"
            )
        if self.priority is not None and self.priority not in Priority.values:
            raise ValidationError(
                f"Invalid priority '{self.priority}'. "
                f"Expected one of: {', '.join(Priority.values)}"
            )
        if self.sort_by not in SORT_FIELDS:
            raise ValidationError(
                f"Invalid sortBy '{self.sort_by}'. "
                f"Expected one of: {', '.join(SORT_FIELDS)}"
            )
        if self.sort_order not in (SORT_ASC, SORT_DESC):
            raise ValidationError(
                f"Invalid sortOrder '{self.sort_order}'. Expected 'asc' or 'desc'"
            )

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "FilterSpec":
        """Build a FilterSpec from request query parameters (camelCase names)."""
        return cls(
            status=_clean(params.get('status')),
            priority=_clean(params.get('priority')),
            category=_clean(params.get('category')),
            sort_by=_clean(params.get('sortBy')) or DEFAULT_SORT_BY,
            sort_order=(_clean(params.get('sortOrder')) or DEFAULT_SORT_ORDER).lower(),
        )


class TaskQueryEngine:
    """Read-only query layer over the Task store."""

    def __init__(self, queryset: Optional[QuerySet] = None) -> None:
        self._base = queryset if queryset is not None else Task.objects.all()

    def list(self, spec: Optional[FilterSpec] = None) -> List[Task]:
        spec = spec or FilterSpec()
        qs = self._base.all()

        if spec.status:
            qs = qs.filter(status=spec.status)
        if spec.priority:
            qs = qs.filter(priority=spec.priority)
        if spec.category:
            qs = qs.filter(category__icontains=spec.category)

        qs = self._apply_sort(qs, spec)

        tasks = list(qs)
        logger.debug(f"TaskQueryEngine: {len(tasks)} task(s) for {spec}")
        return tasks

    def _apply_sort(self, qs: QuerySet, spec: FilterSpec) -> QuerySet:
        column = SORT_FIELDS[spec.sort_by]
        descending = spec.sort_order == SORT_DESC

        if spec.sort_by in RANKED_FIELDS:
            rank = Case(
                *[
                    When(**{column: value}, then=Value(position))
                    for position, value in enumerate(RANKED_FIELDS[spec.sort_by])
                ],
                output_field=IntegerField(),
            )
            qs = qs.annotate(sort_rank=rank)
            key = F('sort_rank')
        else:
            key = F(column)

        if column in NULLABLE_FIELDS:
            primary = key.desc(nulls_last=True) if descending else key.asc(nulls_last=True)
        else:
            primary = key.desc() if descending else key.asc()

        # Creation order breaks ties in both directions
        return qs.order_by(primary, 'created_at', 'id')
