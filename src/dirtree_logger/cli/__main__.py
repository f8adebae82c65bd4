"""Allow ``python -m dirtree_logger.cli``."""

from dirtree_logger.cli.main import main

main()
