"""Command-line argument parsing for dirtree.

This module defines the command-line interface for dirtree, handling
argument parsing and the validation argparse cannot express.
"""

import argparse
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from dirtree_logger import __version__
from dirtree_logger.file_system_tree.traversal_mode import TraversalMode
from dirtree_logger.filters.git_filter import GitIgnoreFilter
from dirtree_logger.renderers import RENDERERS
from dirtree_logger.renderers.json_renderer import PROPERTY_CASES


def create_rules_action(rules: GitIgnoreFilter) -> Type[argparse.Action]:
    """Create an action class that feeds gitignore-style rules into a filter.

    Rule files (-e/--exclude-from) and single rules (-i/--ignore) are added in
    the order they appear on the command line, so later rules, including
    negations, override earlier ones.

    Args:
        rules: The filter to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class RulesAction(argparse.Action):
        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return
            if option_string in ("-e", "--exclude-from"):
                try:
                    rules.load_rules(Path(str(values)))
                except FileNotFoundError as e:
                    parser.error(str(e))
            else:
                rules.add_rule(str(values))

            recorded = getattr(namespace, self.dest, None) or []
            recorded.append(values)
            setattr(namespace, self.dest, recorded)

    return RulesAction


def create_parser(rules: GitIgnoreFilter) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        rules: The gitignore-style filter updated by -e and -i during parsing.

    Returns:
        An ArgumentParser instance configured with dirtree's options.
    """
    description = """
    dirtree: log the structure of a directory as text, JSON or XML.

    The directory is walked once, entries are filtered by name patterns, size
    and attributes, and the traversal mode decides which files and folders
    appear. Text output draws a tree; JSON and XML carry the same facts in
    structured form. Counts and sizes agree across all formats.

    Modes:
      CLEAN        non-empty files and the folders that contain them (default)
      ALL_FILES    every file directly in the directory, no folders
      ALL_FOLDERS  every folder, empty or not, without files
      FOLDERS      folders that have content, without files
      EVERYTHING   every file and every folder
    """

    epilog = """
    Examples:
      # Tree of the current project
      dirtree .

      # Everything, including empty folders, as JSON with statistics
      dirtree --mode EVERYTHING --format json --statistics /path/to/project

      # Skip logs and anything over 10 MB
      dirtree -x "*.log" --max-size 10MB /path/to/project

      # Only Python sources, honouring .gitignore
      dirtree -I "*.py" -e .gitignore /path/to/project

      # Write XML next to the project, extension added automatically
      dirtree -f xml -o tree /path/to/project

      # Settings from a configuration file, overridden by flags
      dirtree --config project.config.json -d 2 /path/to/project
    """

    parser = argparse.ArgumentParser(
        prog="dirtree",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"dirtree {__version__}", help="Show the version and exit"
    )

    parser.add_argument("directory", type=Path, help="The directory to describe.")

    traversal = parser.add_argument_group("traversal")
    traversal.add_argument(
        "-m",
        "--mode",
        choices=[mode.value for mode in TraversalMode],
        help="Which files and folders appear in the tree (default: CLEAN).",
    )
    traversal.add_argument(
        "-d",
        "--max-depth",
        type=int,
        metavar="N",
        help="Do not list the contents of entries deeper than N (-1 for unlimited).",
    )
    traversal.add_argument(
        "-P",
        "--permission-action",
        choices=["ignore", "warn", "fail"],
        default="warn",
        help="How to handle unreadable entries (default: warn).",
    )
    traversal.add_argument(
        "-j",
        "--workers",
        type=int,
        default=1,
        metavar="N",
        help="Walk top-level folders with N threads (default: 1).",
    )

    filtering = parser.add_argument_group("filtering")
    filtering.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip entries whose name matches this glob (case-insensitive, repeatable).",
    )
    filtering.add_argument(
        "-I",
        "--include",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Keep only entries whose name matches one of these globs (repeatable).",
    )

    RulesAction = create_rules_action(rules)
    filtering.add_argument(
        "-e",
        "--exclude-from",
        dest="rules",
        metavar="FILE",
        action=RulesAction,
        help="Load gitignore-style rules from FILE, matched against paths (repeatable).",
    )
    filtering.add_argument(
        "-i",
        "--ignore",
        dest="rules",
        metavar="RULE",
        action=RulesAction,
        help="Add a single gitignore-style rule such as 'build/' or '!keep.log' (repeatable).",
    )
    filtering.add_argument("--max-size", metavar="SIZE", help="Skip files larger than SIZE, e.g. 100MB or 512K.")
    filtering.add_argument("--ignore-hidden", action="store_true", help="Skip hidden entries.")
    filtering.add_argument("--ignore-system", action="store_true", help="Skip system entries.")

    output = parser.add_argument_group("output")
    output.add_argument(
        "-f",
        "--format",
        choices=list(RENDERERS),
        help="Output format (default: text).",
    )
    output.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Write to FILE instead of stdout; the format's extension is added if FILE has none.",
    )
    output.add_argument(
        "--include-info", action="store_true", help="Show timestamps and attribute flags for each entry."
    )
    output.add_argument("-s", "--statistics", action="store_true", help="Append aggregate statistics.")
    output.add_argument("--no-metadata", action="store_true", help="Omit the generation header.")
    output.add_argument("--compact", action="store_true", help="Disable pretty printing.")
    output.add_argument("--case", choices=PROPERTY_CASES, help="JSON property-name case (default: camelCase).")
    output.add_argument("--omit-nulls", action="store_true", help="Leave null values out of JSON output.")
    output.add_argument("--permissions", action="store_true", help="Show owners and attribute flags.")
    output.add_argument("--ascii", action="store_true", help="Draw the text tree with ASCII characters only.")

    general = parser.add_argument_group("general")
    general.add_argument("-c", "--config", type=Path, metavar="FILE", help="Read settings from a JSON file.")
    verbosity = general.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debugging details.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Log errors only.")

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    problems: List[str] = []
    if args.max_depth is not None and args.max_depth < -1:
        problems.append("--max-depth must be -1 or greater")
    if args.workers < 1:
        problems.append("--workers must be at least 1")
    if args.case and args.format not in (None, "json"):
        problems.append("--case only applies to JSON output")
    if args.omit_nulls and args.format not in (None, "json"):
        problems.append("--omit-nulls only applies to JSON output")
    if args.ascii and args.format not in (None, "text"):
        problems.append("--ascii only applies to text output")
    if problems:
        raise ValueError("; ".join(problems))
