from django.urls import path

from .views import analyze_workload_view, generate_tasks_view, suggest_view

urlpatterns = [
    path('ai/suggest', suggest_view, name='ai-suggest'),
    path('ai/generate-tasks', generate_tasks_view, name='ai-generate-tasks'),
    path('ai/analyze-workload', analyze_workload_view, name='ai-analyze-workload'),
]
