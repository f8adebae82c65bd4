import pytest

from dirtree_logger.filters.git_filter import GitIgnoreFilter
from dirtree_logger.types import NodeKind


@pytest.fixture
def temp_gitignore(tmp_path):
    path = tmp_path / ".gitignore"
    path.write_text("*.txt\n!important.txt\nsubdir/\n*.py[cod]\n**/__pycache__/\n")
    return path


@pytest.fixture
def temp_npmignore(tmp_path):
    path = tmp_path / ".npmignore"
    path.write_text("*.log\nnode_modules/\n!important.log\n")
    return path


@pytest.mark.parametrize(
    "path,expected",
    [
        ("file.txt", True),
        ("important.txt", False),
        ("file.py", False),
        ("file.pyc", True),
        ("subdir/file.py", True),
        ("subdir/important.txt", True),
        ("deep/pkg/__pycache__/mod.pyc", True),
        ("deep/pkg/__pycache__/", True),
    ],
)
def test_is_ignored(temp_gitignore, path, expected):
    assert GitIgnoreFilter(temp_gitignore).is_ignored(path) is expected


def test_multiple_files_combine(temp_gitignore, temp_npmignore):
    rules = GitIgnoreFilter([temp_gitignore, temp_npmignore])
    assert rules.is_ignored("debug.log")
    assert not rules.is_ignored("important.log")
    assert rules.is_ignored("node_modules/")
    assert rules.is_ignored("notes.txt")


def test_later_rules_override_earlier(temp_gitignore):
    rules = GitIgnoreFilter(temp_gitignore)
    rules.add_rule("!file.txt")
    assert not rules.is_ignored("file.txt")


def test_missing_rules_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Rules file not found"):
        GitIgnoreFilter(tmp_path / "nope")


def test_empty_filter_includes_everything(node_factory):
    rules = GitIgnoreFilter()
    assert not rules.has_rules()
    assert rules.should_include(node_factory("anything.txt"))


def test_should_include_uses_path_relative_to_root(node_factory):
    root = node_factory("project", NodeKind.DIRECTORY)
    docs = node_factory("docs", NodeKind.DIRECTORY, parent=root)
    readme = node_factory("README.md", parent=docs)
    top_readme = node_factory("README.md", parent=root)

    rules = GitIgnoreFilter()
    rules.add_rule("docs/*.md")
    rules.pre_process(root)

    assert rules.has_rules()
    assert not rules.should_include(readme)
    assert rules.should_include(top_readme)
    assert rules.should_include(docs)
    assert rules.should_include(root)


def test_directory_rules_only_match_directories(node_factory):
    root = node_factory("project", NodeKind.DIRECTORY)
    build_dir = node_factory("build", NodeKind.DIRECTORY, parent=root)
    build_file = node_factory("build", parent=root)

    rules = GitIgnoreFilter()
    rules.add_rule("build/")
    rules.pre_process(root)

    assert not rules.should_include(build_dir)
    assert rules.should_include(build_file)


def test_describe_lists_sources(temp_gitignore):
    rules = GitIgnoreFilter(temp_gitignore)
    rules.add_rule("*.bak")
    assert rules.describe() == {"provider": "GitIgnoreFilter", "rules": [str(temp_gitignore), "*.bak"]}
