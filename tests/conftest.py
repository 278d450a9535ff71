"""
Pytest configuration.

Registers the integration marker and provides fixtures for pointing the
app at fake Ramp credentials.
"""

import pytest

from ramp_approvals.core.config import settings

SANDBOX_URL = "https://demo-api.ramp.com/developer/v1"


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against the real Ramp sandbox"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring real Ramp credentials"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


_SETTINGS_UNDER_TEST = [
    "ramp_client_id",
    "ramp_client_secret",
    "ramp_environment",
    "approvals_preset",
    "approvals_threshold_dollars",
    "approvals_limit",
    "approvals_lookback_days",
    "approvals_department_mapping",
]


@pytest.fixture
def app_settings():
    """Snapshot settings, restore them afterwards and drop any cached Ramp context"""
    from ramp_approvals.api.main import app

    original = {name: getattr(settings, name) for name in _SETTINGS_UNDER_TEST}
    app.state.ramp_context = None
    settings.ramp_environment = "sandbox"
    settings.approvals_preset = "dashboard"
    settings.approvals_threshold_dollars = None
    settings.approvals_limit = None
    settings.approvals_lookback_days = None
    settings.approvals_department_mapping = {}
    try:
        yield settings
    finally:
        for name, value in original.items():
            setattr(settings, name, value)
        app.state.ramp_context = None


@pytest.fixture
def ramp_credentials(app_settings):
    """Configure fake Ramp credentials for the duration of a test"""
    app_settings.ramp_client_id = "client-id"
    app_settings.ramp_client_secret = "client-secret"
    return app_settings


@pytest.fixture
def no_ramp_credentials(app_settings):
    app_settings.ramp_client_id = None
    app_settings.ramp_client_secret = None
    return app_settings
