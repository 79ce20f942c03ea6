# api/views.py

from django.utils import timezone
from rest_framework.views import APIView

from tasks.ai_engine import build_orchestrator

from .envelope import success_response


class HealthView(APIView):
    """GET: Liveness plus whether the AI provider credential is configured."""

    def get(self, request, *args, **kwargs):
        ai = build_orchestrator().health_check()
        return success_response({
            'status': 'OK',
            'timestamp': timezone.now().isoformat(),
            'aiConfigured': ai['ai_configured'],
            'model': ai['model'],
        })

health_view = HealthView.as_view()
