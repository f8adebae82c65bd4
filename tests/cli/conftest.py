import logging

import pytest

from dirtree_logger.cli.logging_setup import PACKAGE_LOGGER
from dirtree_logger.cli.output_writer import interrupt_state


@pytest.fixture(autouse=True)
def isolated_cli_state():
    """Drop the console handler and interrupt flags a CLI run leaves behind."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level = package_logger.level
    yield
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(level)
    interrupt_state.restore()
    interrupt_state.reset()
