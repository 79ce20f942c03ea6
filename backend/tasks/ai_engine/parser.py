# tasks/ai_engine/parser.py
"""
Response Parser
===============

Turns raw model text into the structured result each intent expects.

- suggest / analyze: the text is opaque prose and is returned unchanged.
  Only an empty (or whitespace-only) completion is rejected.
- generate: the text must be a JSON array of task objects. Each element is
  validated against the DraftTask contract. A single bad element rejects
  the whole batch with one UpstreamParseError naming its index; nothing
  is coerced and no partial batch is ever returned.

The only repair applied to generate output is removing one Markdown code
fence wrapping the whole body (```json ... ```).
"""

from __future__ import annotations

import datetime
import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from api.exceptions import UpstreamParseError

from ..models import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Priority,
    Status,
    normalize_tags,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*(?P<body>.*?)\s*```$", re.DOTALL)


@dataclass(frozen=True)
class DraftTask:
    """An AI-proposed task that has not been persisted."""

    title: str
    description: str = ""
    priority: str = Priority.MEDIUM.value
    status: str = Status.PENDING.value
    category: str = ""
    due_date: Optional[datetime.date] = None
    estimated_duration: Optional[float] = None
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "status": self.status,
            "category": self.category,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "estimatedDuration": self.estimated_duration,
            "tags": list(self.tags),
        }


class _InvalidElement(Exception):
    pass


def parse_text(raw: Optional[str]) -> str:
    """Return prose output unchanged, rejecting an empty completion."""
    if raw is None or not raw.strip():
        raise UpstreamParseError("AI provider returned an empty response")
    return raw


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} is out of range")
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON number")


def _strip_code_fence(text: str) -> str:
    match = _FENCE_RE.match(text)
    return match.group("body") if match else text


def _optional_string(item: Dict[str, Any], key: str, max_length: int) -> str:
    value = item.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _InvalidElement(f"'{key}' must be a string")
    if len(value) > max_length:
        raise _InvalidElement(f"'{key}' exceeds {max_length} characters")
    return value


def _enum_value(item: Dict[str, Any], key: str, allowed: List[str], default: str) -> str:
    if key not in item or item[key] is None:
        return default
    value = item[key]
    if value not in allowed:
        raise _InvalidElement(
            f"{key} {value!r} is not one of {', '.join(allowed)}"
        )
    return value


def _validate_element(item: Any) -> DraftTask:
    if not isinstance(item, dict):
        raise _InvalidElement("element is not a JSON object")

    title = item.get("title")
    if not isinstance(title, str) or not title.strip():
        raise _InvalidElement("'title' is required and must be a non-empty string")
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise _InvalidElement(f"'title' exceeds {TITLE_MAX_LENGTH} characters")

    priority = _enum_value(item, "priority", list(Priority.values), Priority.MEDIUM.value)
    status = _enum_value(item, "status", list(Status.values), Status.PENDING.value)

    duration = item.get("estimatedDuration")
    if duration is not None:
        # bool is an int subclass; "true" is not a duration
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            raise _InvalidElement("'estimatedDuration' must be a number")
        if duration < 0:
            raise _InvalidElement("'estimatedDuration' must not be negative")

    due_date = None
    raw_due = item.get("dueDate")
    if raw_due is not None:
        if not isinstance(raw_due, str):
            raise _InvalidElement("'dueDate' must be an ISO date string")
        try:
            due_date = datetime.date.fromisoformat(raw_due)
        except ValueError:
            raise _InvalidElement(f"'dueDate' {raw_due!r} is not an ISO date")

    tags = item.get("tags")
    if tags is None:
        tags = []
    elif not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise _InvalidElement("'tags' must be a list of strings")

    return DraftTask(
        title=title,
        description=_optional_string(item, "description", DESCRIPTION_MAX_LENGTH),
        priority=priority,
        status=status,
        category=_optional_string(item, "category", CATEGORY_MAX_LENGTH),
        due_date=due_date,
        estimated_duration=duration,
        tags=normalize_tags(tags),
    )


def parse_draft_tasks(raw: Optional[str]) -> List[DraftTask]:
    """
    Validate generate-tasks output into a list of DraftTask.

    Raises:
        UpstreamParseError: on empty text, invalid JSON, a non-array body, an
            empty array, or any invalid element (``index`` set to its position).
    """
    if raw is None or not raw.strip():
        raise UpstreamParseError("AI provider returned an empty response")

    body = _strip_code_fence(raw.strip())

    try:
        # strict JSON: no NaN, Infinity or overflowing floats
        data = json.loads(body, parse_float=_finite_float, parse_constant=_reject_constant)
    except ValueError as e:
        logger.error(f"Failed to decode AI response as JSON: {e}")
        raise UpstreamParseError(
            "Failed to parse AI response as JSON", details=str(e)
        ) from e

    if not isinstance(data, list):
        raise UpstreamParseError(
            "AI response must be a JSON array of tasks",
            details=f"got {type(data).__name__}",
        )
    if not data:
        raise UpstreamParseError("AI response contained no tasks")

    drafts: List[DraftTask] = []
    for index, item in enumerate(data):
        try:
            drafts.append(_validate_element(item))
        except _InvalidElement as e:
            logger.error(f"Rejecting generated batch: task at index {index}: {e}")
            raise UpstreamParseError(
                f"Invalid task at index {index}: {e}",
                details={"index": index, "element": item},
                index=index,
            ) from e

    return drafts
