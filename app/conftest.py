"""
Root pytest configuration for the Django project.

pytest-django loads config.settings (see pyproject.toml). App-specific
fixtures are defined in each app's tests/conftest.py.
"""

import pytest


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_stripe_charge.py, test_locks.py → integration (hit the database)
    - test_models.py, test_charge_normalizer.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_stripe_charge.py",
        "test_locks.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_exceptions.py",
        "test_charge_normalizer.py",
        "test_stripe_adapter.py",
        "test_types.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = item.path.name

        if any(pattern == filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern == filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)
