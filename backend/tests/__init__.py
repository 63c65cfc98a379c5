"""
Test Suite

Structure:
    tests/
    ├── __init__.py                  # This file
    ├── conftest.py                  # In-memory ports and fixtures
    ├── test_registry.py             # TransitionRegistry
    ├── test_state_machine.py        # validate / execute / next actions
    ├── test_presentation.py         # Status labels, colors, badges
    ├── test_review_service.py       # Public API and heritage routing
    ├── test_notification_service.py # Transition -> recipients mapping
    ├── test_repositories.py         # Motor repositories (mocked collections)
    └── test_api.py                  # FastAPI routes

To run tests:
    pytest backend/tests/
"""
