# tasks/ai_engine/prompts.py
"""
Prompt construction for the three assistant intents.

Every builder is pure and deterministic: the same input always yields the
same ``Prompt``. Missing optional values are rendered as explicit
placeholders so the prompt layout never changes with input completeness.
"""

from __future__ import annotations

import datetime
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from api.exceptions import ValidationError

from ..models import Priority


@dataclass(frozen=True)
class Prompt:
    system_instruction: str
    user_prompt: str


NO_DESCRIPTION = "No description provided"
NO_PRIORITY = "No priority set"
NO_CATEGORY = "No category provided"
NO_DUE_DATE = "No due date set"
NO_CONTEXT = "No additional context provided"

SUGGEST_SYSTEM_INSTRUCTION = (
    "You are a helpful productivity assistant that provides practical "
    "task management advice."
)

GENERATE_SYSTEM_INSTRUCTION = (
    "You are a project management expert who breaks down goals into "
    "actionable tasks. Respond only with valid JSON."
)

ANALYZE_SYSTEM_INSTRUCTION = (
    "You are a productivity consultant who analyzes workloads and provides "
    "optimization recommendations."
)

SUMMARY_FIELDS = ("title", "priority", "status", "estimatedDuration", "dueDate")


def _text_or(value: Any, placeholder: str) -> str:
    if value is None:
        return placeholder
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    text = str(value).strip()
    return text or placeholder


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def build_suggest_prompt(task: Mapping[str, Any], context: Optional[str] = None) -> Prompt:
    """
    Ask for improvement suggestions on a single task.

    ``task`` uses the public field names: title, description, priority,
    category, dueDate.
    """
    title = str(task.get("title") or "").strip()
    if not title:
        raise ValidationError("Task title is required")

    user_prompt = (
        "As a productivity expert, analyze this task and provide helpful suggestions:\n"
        "\n"
        f"Task Title: {title}\n"
        f"Description: {_text_or(task.get('description'), NO_DESCRIPTION)}\n"
        f"Priority: {_text_or(task.get('priority'), NO_PRIORITY)}\n"
        f"Category: {_text_or(task.get('category'), NO_CATEGORY)}\n"
        f"Due Date: {_text_or(task.get('dueDate'), NO_DUE_DATE)}\n"
        f"Additional Context: {_text_or(context, NO_CONTEXT)}\n"
        "\n"
        "Please provide:\n"
        "1. Task breakdown suggestions (if the task is complex)\n"
        "2. Estimated time to complete\n"
        "3. Priority recommendation\n"
        "4. Potential challenges and solutions\n"
        "5. Related tasks or dependencies to consider\n"
        "\n"
        "Keep your response concise and actionable."
    )
    return Prompt(SUGGEST_SYSTEM_INSTRUCTION, user_prompt)


def build_generate_prompt(description: str, project_context: Optional[str] = None) -> Prompt:
    """Ask for 5-8 draft tasks as a bare JSON array."""
    description = (description or "").strip()
    if not description:
        raise ValidationError("Description is required")

    example = json.dumps(
        [
            {
                "title": "Task title",
                "description": "Brief description",
                "priority": "medium",
                "category": "category",
                "estimatedDuration": 60,
            }
        ],
        indent=2,
    )

    user_prompt = (
        "Based on this project description, generate a list of specific, actionable tasks:\n"
        "\n"
        f"Project/Goal: {description}\n"
        f"Context: {_text_or(project_context, NO_CONTEXT)}\n"
        "\n"
        "Generate 5-8 tasks that would help accomplish this goal. For each task, provide:\n"
        "- title: concise, action-oriented, at most 100 characters (required)\n"
        "- description: brief description, at most 500 characters\n"
        f"- priority: exactly one of {', '.join(Priority.values)}\n"
        "- category: a short category name, at most 50 characters\n"
        "- estimatedDuration: estimated duration in minutes, as a number\n"
        "\n"
        "Format your response as a JSON array of task objects with these properties:\n"
        f"{example}\n"
        "\n"
        "Only respond with the JSON array, no additional text."
    )
    return Prompt(GENERATE_SYSTEM_INSTRUCTION, user_prompt)


def summarize_tasks(tasks: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Reduce task payloads to the fields the workload analysis needs."""
    return [{field: task.get(field) for field in SUMMARY_FIELDS} for task in tasks]


def build_analyze_prompt(task_summaries: Sequence[Mapping[str, Any]]) -> Prompt:
    """Ask for a prose workload assessment of the given task summaries."""
    if not task_summaries:
        raise ValidationError("Tasks array is required and must not be empty")

    serialized = json.dumps(
        summarize_tasks(task_summaries), indent=2, default=_json_default
    )

    user_prompt = (
        "Analyze this task workload and provide recommendations:\n"
        "\n"
        f"Tasks: {serialized}\n"
        "\n"
        "Please analyze:\n"
        "1. Overall workload assessment\n"
        "2. Priority distribution\n"
        "3. Time management suggestions\n"
        "4. Potential bottlenecks or overcommitments\n"
        "5. Recommendations for task scheduling and organization\n"
        "\n"
        "Provide a concise analysis with actionable recommendations."
    )
    return Prompt(ANALYZE_SYSTEM_INSTRUCTION, user_prompt)
