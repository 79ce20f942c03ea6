# tasks/serializers.py

from rest_framework import serializers

from .models import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    Status,
    Task,
    normalize_tags,
)


class TagListField(serializers.Field):
    """
    Accepts either a JSON list of strings or a single comma-separated
    string ("a, b, b") and stores the deduplicated tag set.
    """
    default_error_messages = {
        'invalid': 'Tags must be a list of strings or a comma-separated string.',
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            items = data.split(',')
        elif isinstance(data, (list, tuple)):
            items = data
        else:
            self.fail('invalid')

        if not all(isinstance(item, str) for item in items):
            self.fail('invalid')
        return normalize_tags(items)

    def to_representation(self, value):
        return list(value or [])


class TaskSerializer(serializers.ModelSerializer):
    """
    Public JSON shape of a Task. Field names are camelCase on the wire and
    map onto the snake_case model columns.
    """
    description = serializers.CharField(
        max_length=DESCRIPTION_MAX_LENGTH, required=False, allow_blank=True, allow_null=True
    )
    category = serializers.CharField(
        max_length=CATEGORY_MAX_LENGTH, required=False, allow_blank=True, allow_null=True
    )
    dueDate = serializers.DateField(source='due_date', required=False, allow_null=True)
    estimatedDuration = serializers.IntegerField(
        source='estimated_duration', required=False, allow_null=True, min_value=1
    )
    tags = TagListField(required=False)
    aiSuggestions = serializers.CharField(
        source='ai_suggestions', required=False, allow_blank=True, allow_null=True
    )
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Task
        fields = [
            'id', 'title', 'description', 'priority', 'status', 'category',
            'dueDate', 'estimatedDuration', 'tags', 'aiSuggestions',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = ['id', 'createdAt', 'updatedAt']

    # Columns are non-null strings; an explicit null clears them
    def validate_description(self, value):
        return value or ''

    def validate_category(self, value):
        return value or ''


class TaskStatusSerializer(serializers.Serializer):
    """Body of PATCH /tasks/<id>/status."""
    status = serializers.ChoiceField(choices=Status.choices)
