# tasks/tests/__init__.py
"""
Task App Test Suite
===================

This package contains unit and integration tests for the tasks application.

Modules:
--------
- test_query: FilterSpec validation and TaskQueryEngine filtering/sorting
- test_api: Task CRUD endpoints and the response envelope
- test_engine: Prompt construction and model-output parsing
- test_orchestration: ModelClient error mapping and the AIOrchestrator

Running Tests:
--------------
    # Run all task tests
    python manage.py test tasks

    # Run specific test module
    python manage.py test tasks.tests.test_engine
    python manage.py test tasks.tests.test_orchestration

    # Run with verbose output
    python manage.py test tasks -v 2
"""
