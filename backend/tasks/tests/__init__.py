# tasks/tests/__init__.py
"""
Task App Test Suite
===================

Modules:
--------
- test_scoring: Per-factor scoring and ranking (pure)
- test_decision: DecisionEngine recommendations, reasons and confidence
- test_feedback: FeedbackRecorder against an in-memory store
- test_services: DjangoDecisionStore against the database
- test_nl_parser: ExternalTaskParser and ParseCache with OpenAI mocked
- test_archive: The completed-task archiving job
- test_api: HTTP endpoints

Running Tests:
--------------
    # Run all task tests
    python manage.py test tasks

    # Run specific test module
    python manage.py test tasks.tests.test_decision

    # Or through pytest-django
    pytest backend/tasks
"""
