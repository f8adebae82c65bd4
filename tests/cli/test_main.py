"""Unit tests for the dirtree command."""

import json
import logging
import os
import sys

import pytest

from dirtree_logger.cli import main as cli_main
from dirtree_logger.cli.argparser import create_parser
from dirtree_logger.cli.main import (
    EXIT_BROKEN_PIPE,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_PERMISSION_DENIED,
    build_filter_configuration,
    build_render_options,
    run,
)
from dirtree_logger.config import AppConfiguration
from dirtree_logger.filters.configuration import FilterConfiguration
from dirtree_logger.filters.git_filter import GitIgnoreFilter


def parse(*argv):
    return create_parser(GitIgnoreFilter()).parse_args([*argv, "dir"])


def test_text_output_to_file(scenario_dir, tmp_path, caplog):
    target = tmp_path / "tree"
    with caplog.at_level(logging.INFO, logger="dirtree_logger"):
        status = run([str(scenario_dir), "-o", str(target)])

    assert status == EXIT_OK
    written = (tmp_path / "tree.txt").read_text(encoding="utf-8")
    assert written.startswith("Directory Tree\n")
    assert written.endswith("R/\n└── N/\n    ├── f1.txt (1.00 KB)\n    └── f2.txt (2.00 KB)\n")
    assert "Found 2 file(s) and 1 folder(s), 3.00 KB in total" in caplog.text
    assert "Directory tree written to" in caplog.text
    assert any(record.levelname == "SUCCESS" for record in caplog.records)


def test_json_output_to_stdout(scenario_dir, capfd):
    status = run([str(scenario_dir), "-m", "EVERYTHING", "-f", "json", "-s", "--no-metadata", "-q"])

    assert status == EXIT_OK
    document = json.loads(capfd.readouterr().out)
    assert [child["name"] for child in document["tree"]["children"]] == ["E", "N"]
    assert document["statistics"]["totalFiles"] == 2


def test_filter_flags(mixed_dir, tmp_path):
    target = tmp_path / "out.txt"
    status = run(
        [str(mixed_dir), "-m", "EVERYTHING", "-x", "*.txt", "--ignore-hidden", "-i", "sub/"]
        + ["--no-metadata", "-o", str(target)]
    )

    assert status == EXIT_OK
    lines = target.read_text(encoding="utf-8").splitlines()
    assert lines == ["mixed/", "├── b.log (20 bytes)", "├── empty_dir/", "└── only_empty/"]


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="Needs byte-string file names")
@pytest.mark.parametrize("output_format", ["text", "json", "xml"])
def test_undecodable_file_name_is_written(tmp_path, capfd, output_format):
    root = tmp_path / "names"
    (root / "d").mkdir(parents=True)
    (root / "ok.txt").write_text("ok")
    try:
        with open(os.path.join(os.fsencode(root / "d"), b"\xff.txt"), "wb") as handle:
            handle.write(b"x")
    except OSError:
        pytest.skip("File system rejects names that are not valid UTF-8")

    status = run([str(root), "-f", output_format, "-q"])

    assert status == EXIT_OK
    out = capfd.readouterr().out
    assert "\\xff.txt" in out
    assert "ok.txt" in out


def test_config_file_supplies_defaults(scenario_dir, tmp_path):
    config = tmp_path / "settings.json"
    settings = {"output_format": "xml", "logging_mode": "EVERYTHING", "render": {"include_metadata": False}}
    config.write_text(json.dumps(settings))
    target = tmp_path / "tree"

    assert run([str(scenario_dir), "-c", str(config), "-o", str(target)]) == EXIT_OK

    content = (tmp_path / "tree.xml").read_text(encoding="utf-8")
    assert 'name="E"' in content
    assert "<Metadata>" not in content


def test_flags_override_config_file(scenario_dir, tmp_path):
    config = tmp_path / "settings.json"
    config.write_text(json.dumps({"output_format": "xml"}))
    target = tmp_path / "tree"

    assert run([str(scenario_dir), "-c", str(config), "-f", "json", "-o", str(target)]) == EXIT_OK
    assert (tmp_path / "tree.json").exists()


def test_missing_directory(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="dirtree_logger"):
        status = run([str(tmp_path / "missing")])
    assert status == EXIT_ERROR
    assert "Root path does not exist" in caplog.text


def test_invalid_config_file(scenario_dir, tmp_path, caplog):
    config = tmp_path / "settings.json"
    config.write_text("{broken")
    with caplog.at_level(logging.ERROR, logger="dirtree_logger"):
        assert run([str(scenario_dir), "-c", str(config)]) == EXIT_ERROR
    assert "Invalid configuration" in caplog.text


def test_invalid_argument_combination(scenario_dir, caplog):
    with caplog.at_level(logging.ERROR, logger="dirtree_logger"):
        assert run([str(scenario_dir), "-f", "xml", "--case", "snake_case"]) == EXIT_ERROR
    assert "--case only applies to JSON output" in caplog.text


def test_invalid_max_size(scenario_dir):
    assert run([str(scenario_dir), "--max-size", "lots"]) == EXIT_ERROR


def test_usage_error_exits_with_two():
    with pytest.raises(SystemExit) as exc_info:
        run(["--mode", "nonsense", "."])
    assert exc_info.value.code == 2


@pytest.mark.skipif(
    sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="Requires POSIX permissions enforced for the current user",
)
def test_permission_failure_exit_code(scenario_dir):
    locked = scenario_dir / "locked"
    locked.mkdir()
    locked.chmod(0)
    try:
        assert run([str(scenario_dir), "-P", "fail", "-q"]) == EXIT_PERMISSION_DENIED
        assert run([str(scenario_dir), "-P", "warn", "-q", "-o", str(scenario_dir.parent / "out")]) == EXIT_OK
    finally:
        locked.chmod(0o755)


def test_keyboard_interrupt(scenario_dir, monkeypatch):
    def interrupted(*args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli_main.DirectoryTreeLogger, "render", interrupted)
    assert run([str(scenario_dir), "-q"]) == EXIT_INTERRUPTED
    assert cli_main.interrupt_state.sigint_received.is_set()


def test_broken_pipe(scenario_dir, monkeypatch):
    def broken(self, text):
        raise BrokenPipeError

    monkeypatch.setattr(cli_main.OutputWriter, "write", broken)
    assert run([str(scenario_dir), "-q"]) == EXIT_BROKEN_PIPE


def test_main_exits_with_status(scenario_dir, tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["dirtree", str(scenario_dir), "-q", "-o", str(tmp_path / "tree")])
    with pytest.raises(SystemExit) as exc_info:
        cli_main.main()
    assert exc_info.value.code == EXIT_OK


def test_build_filter_configuration_merges_patterns():
    base = FilterConfiguration(exclude_patterns=frozenset({"*.tmp"}), max_size_bytes=10)
    merged = build_filter_configuration(parse("-x", "*.log", "--max-size", "1KB", "--ignore-hidden"), base)

    assert merged.exclude_patterns == frozenset({"*.tmp", "*.log"})
    assert merged.max_size_bytes == 1024
    assert merged.ignore_hidden
    assert build_filter_configuration(parse(), base) is base


def test_build_render_options():
    options = build_render_options(parse("-s", "--compact", "--include-info"), AppConfiguration(), "text")
    assert options == {
        "include_statistics": True,
        "pretty_print": False,
        "show_timestamps": True,
        "show_attributes": True,
    }


def test_build_render_options_drops_unsupported(caplog):
    settings = AppConfiguration(render={"ascii_only": True, "indent": 4})
    with caplog.at_level(logging.WARNING, logger="dirtree_logger"):
        options = build_render_options(parse("--case", "kebab-case"), settings, "json")

    assert options == {"indent": 4, "property_case": "kebab-case"}
    assert "ascii_only" in caplog.text
