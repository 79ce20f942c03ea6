# assistant/views.py

import logging

from rest_framework import generics

from api.envelope import success_response
from tasks.ai_engine import build_orchestrator

from .serializers import (
    AnalyzeWorkloadRequestSerializer,
    GenerateTasksRequestSerializer,
    SuggestRequestSerializer,
)

logger = logging.getLogger(__name__)


class AssistantView(generics.GenericAPIView):
    """
    Base for the AI endpoints: validates the request body, then hands the
    typed data to an AIOrchestrator built per request.
    """

    def get_orchestrator(self):
        return build_orchestrator()

    def validated(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data


class SuggestView(AssistantView):
    """POST: Suggestions for improving one task. Body: {task, context?}."""
    serializer_class = SuggestRequestSerializer

    def post(self, request, *args, **kwargs):
        data = self.validated(request)
        result = self.get_orchestrator().suggest(data['task'], data.get('context'))
        return success_response(result.to_dict())

suggest_view = SuggestView.as_view()


class GenerateTasksView(AssistantView):
    """POST: Draft 5-8 tasks from a project description."""
    serializer_class = GenerateTasksRequestSerializer

    def post(self, request, *args, **kwargs):
        data = self.validated(request)
        result = self.get_orchestrator().generate_tasks(
            data['description'], data.get('projectContext')
        )
        return success_response(result.to_dict())

generate_tasks_view = GenerateTasksView.as_view()


class AnalyzeWorkloadView(AssistantView):
    """POST: Prose workload assessment of a non-empty list of task summaries."""
    serializer_class = AnalyzeWorkloadRequestSerializer

    def post(self, request, *args, **kwargs):
        data = self.validated(request)
        result = self.get_orchestrator().analyze_workload(data['tasks'])
        return success_response(result.to_dict())

analyze_workload_view = AnalyzeWorkloadView.as_view()
