# assistant/tests/__init__.py
"""
Assistant App Test Suite
========================

- test_api: /api/ai/suggest, /api/ai/generate-tasks, /api/ai/analyze-workload

    python manage.py test assistant
"""
