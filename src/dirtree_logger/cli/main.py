"""Command-line interface for dirtree.

This module provides the ``dirtree`` command, which walks a directory, renders
the resulting tree in the requested format and writes it to stdout or a file.

Exit Codes:
    0: Successful completion
    1: Runtime or configuration error
    2: Command-line syntax error
    126: Permission denied with ``-P fail``
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    # Default CLEAN tree of a directory
    $ dirtree /path/to/dir

    # JSON with statistics, written to tree.json
    $ dirtree /path/to/dir -f json -s -o tree
"""

import argparse
import dataclasses
import logging
import sys
from typing import Any, Dict, Optional, Sequence

from dirtree_logger.cli.argparser import create_parser, validate_args
from dirtree_logger.cli.logging_setup import SUCCESS, configure_logging, level_for
from dirtree_logger.cli.output_writer import OutputWriter, interrupt_state
from dirtree_logger.config import AppConfiguration, load_configuration
from dirtree_logger.exceptions import DirectoryTreeError, PermissionDeniedError
from dirtree_logger.file_system_tree.permission_action import PermissionAction
from dirtree_logger.filters.configuration import FilterConfiguration, parse_file_size
from dirtree_logger.filters.git_filter import GitIgnoreFilter
from dirtree_logger.renderers import RENDERERS
from dirtree_logger.tree_logger import DirectoryTreeLogger

logger = logging.getLogger("dirtree_logger.cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PERMISSION_DENIED = 126
EXIT_INTERRUPTED = 130
EXIT_BROKEN_PIPE = 141

PERMISSION_ACTIONS = {
    "ignore": PermissionAction.IGNORE,
    "warn": PermissionAction.WARN,
    "fail": PermissionAction.RAISE,
}


def build_filter_configuration(args: argparse.Namespace, base: FilterConfiguration) -> FilterConfiguration:
    """Merge command-line filter options over the configured ones.

    Patterns are added to the configured sets; switches can only turn options on.

    Raises:
        ValueError: If --max-size is not a valid size.
    """
    changes: Dict[str, Any] = {}
    if args.exclude:
        changes["exclude_patterns"] = base.exclude_patterns | frozenset(args.exclude)
    if args.include:
        changes["include_patterns"] = base.include_patterns | frozenset(args.include)
    if args.max_size is not None:
        changes["max_size_bytes"] = parse_file_size(args.max_size)
    if args.ignore_hidden:
        changes["ignore_hidden"] = True
    if args.ignore_system:
        changes["ignore_system"] = True
    return dataclasses.replace(base, **changes) if changes else base


def build_render_options(args: argparse.Namespace, settings: AppConfiguration, output_format: str) -> Dict[str, Any]:
    """Collect render overrides that the selected renderer understands."""
    options = settings.render_options()
    if args.include_info:
        options["show_timestamps"] = True
        options["show_attributes"] = True
    if args.statistics:
        options["include_statistics"] = True
    if args.no_metadata:
        options["include_metadata"] = False
    if args.compact:
        options["pretty_print"] = False
    if args.permissions:
        options["include_permissions"] = True
    if args.case:
        options["property_case"] = args.case
    if args.omit_nulls:
        options["null_handling"] = "omit"
    if args.ascii:
        options["ascii_only"] = True

    known = RENDERERS[output_format].options()
    ignored = sorted(key for key in options if key not in known)
    if ignored:
        logger.warning("Ignoring option(s) not supported by %s output: %s", output_format, ", ".join(ignored))
    return {key: value for key, value in options.items() if key in known}


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command and return its exit status.

    Args:
        argv: Arguments without the program name; sys.argv[1:] when None.
    """
    rules = GitIgnoreFilter()
    parser = create_parser(rules)
    args = parser.parse_args(argv)

    configure_logging(level_for(verbose=args.verbose, quiet=args.quiet))
    interrupt_state.reset()
    interrupt_state.install()

    try:
        validate_args(args)
        settings = load_configuration(args.config)
        if not (args.verbose or args.quiet):
            configure_logging(level_for(show_progress=settings.show_progress))

        output_format = args.format or settings.output_format
        tree_logger = DirectoryTreeLogger(
            args.directory,
            mode=args.mode or settings.logging_mode,
            filter_configuration=build_filter_configuration(args, settings.filters),
            filter_provider=rules if rules.has_rules() else None,
            max_depth=args.max_depth if args.max_depth is not None else settings.max_depth,
            permission_action=PERMISSION_ACTIONS[args.permission_action],
            workers=args.workers,
        )

        logger.info("Scanning %s", args.directory)
        output = tree_logger.render(output_format, **build_render_options(args, settings, output_format))
        statistics = tree_logger.statistics
        logger.info(
            "Found %d file(s) and %d folder(s), %s in total",
            statistics.total_files,
            statistics.total_directories,
            statistics.total_size_formatted,
        )

        if args.output is not None:
            target = args.output if args.output.suffix else args.output.with_suffix(output.file_extension)
            with OutputWriter(target) as writer:
                writer.write(output.text + "\n")
            logger.log(SUCCESS, "Directory tree written to %s", target)
        else:
            sys.stdout.flush()
            with OutputWriter(sys.stdout.fileno()) as writer:
                writer.write(output.text + "\n")

    except BrokenPipeError:
        return EXIT_BROKEN_PIPE
    except KeyboardInterrupt:
        interrupt_state.mark_interrupted()
        logger.error("Interrupted")
        return EXIT_INTERRUPTED
    except PermissionDeniedError as e:
        logger.error("%s", e)
        return EXIT_PERMISSION_DENIED
    except (DirectoryTreeError, ValueError, OSError) as e:
        logger.error("%s", e)
        return EXIT_ERROR
    finally:
        interrupt_state.restore()

    return EXIT_OK


def main() -> None:
    """Entry point for the ``dirtree`` console script."""
    sys.exit(run())


if __name__ == "__main__":
    main()
