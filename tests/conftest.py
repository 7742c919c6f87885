"""Shared test fixtures."""

import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cspkit.logging import close_logging
from cspkit.policy import GUID, URI, Origin


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo init_logging() so caplog keeps seeing cspkit records."""
    yield
    close_logging()
    package_logger = logging.getLogger("cspkit")
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def origin():
    """Enforcing origin used across matching tests."""
    return Origin(scheme="https", host="example.com", port=443)


@pytest.fixture
def same_origin_uri():
    return URI(scheme="https", host="example.com", port=443, path="/img/logo.png")


@pytest.fixture
def blob_guid():
    return GUID("blob:https://example.com/550e8400-e29b-41d4-a716-446655440000")
