"""pytest plugin wiring the harness into a test run.

Enable with `pytest_plugins = ["src.hooks"]` in a conftest.py. Provides:
    - harness_config: the resolved DeviceConfig
    - device_session: a registered AppiumSession, closed after the test with a
      screenshot attached when the test failed
"""
import logging

import pytest

from .config import load_config
from .core import SessionAlreadyRegisteredError, get_session_registry, new_session
from .pages.permissions import PermissionHandler
from .tools.screenshot import attach_page_source, attach_screenshot

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level=logging.INFO) -> None:
    """Configure root logging for a harness run."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: needs a real device and Appium server"
    )


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Record each phase's report on the item as rep_setup / rep_call / rep_teardown."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


def _test_failed(item) -> bool:
    for when in ("setup", "call"):
        report = getattr(item, f"rep_{when}", None)
        if report is not None and report.failed:
            return True
    return False


@pytest.fixture(scope="session")
def harness_config():
    return load_config()


@pytest.fixture
def device_session(request, harness_config):
    """Open a session for this test and bind it to the current worker."""
    registry = get_session_registry()
    session = new_session(harness_config)
    try:
        registry.open(session)
    except SessionAlreadyRegisteredError:
        session.close()
        raise
    try:
        if not harness_config.auto_grant_permissions:
            PermissionHandler(session).accept_all()
        yield session
    finally:
        if _test_failed(request.node):
            name = request.node.name
            logger.info(f"Test failed, capturing artifacts for {name}")
            attach_screenshot(session, f"{name}_failure")
            attach_page_source(session, f"{name}_page_source")
        registry.close()
