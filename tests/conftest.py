import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_loguru():
    # CLI entry points rebind sinks to the (captured) stderr of the current test
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
