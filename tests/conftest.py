import os

import pytest

from crewrota.planning import build_schedule

_SLOW_ENV_FLAG = "CREWROTA_RUN_SLOW_TESTS"


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-horizon builds skipped by default")


def pytest_collection_modifyitems(config, items):
    """Skip long-horizon builds unless explicitly enabled."""

    if os.getenv(_SLOW_ENV_FLAG):
        return
    skip_slow = pytest.mark.skip(reason=f"Set {_SLOW_ENV_FLAG}=1 to run long-horizon builds.")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(scope="session")
def schedule_14x7():
    return build_schedule({"W": 14, "R": 7, "I": 5, "totalCoverageDays": 90})
