"""
Test Configuration and Fixtures

Environment setup MUST happen before any application import: settings and the
loguru sinks are configured at import time.
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)
    # Tests never use the file-backed store unless they build one themselves
    os.environ['HOLD_STORAGE_PATH'] = ''
    os.environ.setdefault('CLIENT_PLATFORM', 'test')


_early_setup_test_environment()

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402

from test.helpers import FakeClock  # noqa: E402


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 14, 8, 0, 0, tzinfo=timezone.utc))
