# assistant/serializers.py
"""Typed request bodies for the /api/ai/* endpoints."""

import math

from rest_framework import serializers

from tasks.models import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Priority,
    Status,
)


class SuggestTaskSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField(
        max_length=DESCRIPTION_MAX_LENGTH, required=False, allow_blank=True, allow_null=True
    )
    priority = serializers.ChoiceField(choices=Priority.choices, required=False, allow_null=True)
    category = serializers.CharField(
        max_length=CATEGORY_MAX_LENGTH, required=False, allow_blank=True, allow_null=True
    )
    dueDate = serializers.DateField(required=False, allow_null=True)


class SuggestRequestSerializer(serializers.Serializer):
    task = SuggestTaskSerializer()
    context = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class GenerateTasksRequestSerializer(serializers.Serializer):
    description = serializers.CharField()
    projectContext = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DurationField(serializers.FloatField):
    """Non-negative minutes; whole numbers stay integers."""

    def __init__(self, **kwargs):
        kwargs.setdefault('min_value', 0)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail('invalid')
        value = super().to_internal_value(data)
        if not math.isfinite(value):
            self.fail('invalid')
        return int(value) if value.is_integer() else value


class TaskSummarySerializer(serializers.Serializer):
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    priority = serializers.ChoiceField(choices=Priority.choices, required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Status.choices, required=False, allow_null=True)
    estimatedDuration = DurationField(required=False, allow_null=True)
    dueDate = serializers.DateField(required=False, allow_null=True)


class AnalyzeWorkloadRequestSerializer(serializers.Serializer):
    tasks = TaskSummarySerializer(many=True, allow_empty=False)
