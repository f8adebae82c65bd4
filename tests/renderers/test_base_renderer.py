"""Tests for renderer configuration handling and the renderer registry."""

import pytest

from dirtree_logger.exceptions import InvalidConfigurationError
from dirtree_logger.renderers import RENDERERS, get_renderer
from dirtree_logger.renderers.base_renderer import COMMON_OPTIONS
from dirtree_logger.renderers.json_renderer import JSONRenderer
from dirtree_logger.renderers.text_renderer import TextRenderer
from dirtree_logger.renderers.xml_renderer import XMLRenderer


def test_registry():
    assert RENDERERS == {"text": TextRenderer, "json": JSONRenderer, "xml": XMLRenderer}
    assert isinstance(get_renderer("XML"), XMLRenderer)


def test_unknown_format():
    with pytest.raises(ValueError, match="Unknown output format 'yaml'"):
        get_renderer("yaml")


@pytest.mark.parametrize("renderer_class", [TextRenderer, JSONRenderer, XMLRenderer])
def test_defaults_cover_common_options(renderer_class):
    defaults = renderer_class().default_configuration()
    assert set(COMMON_OPTIONS) <= set(defaults)
    assert defaults["datetime_format"] == "%Y-%m-%d %H:%M:%S"
    assert defaults["max_depth"] == -1
    assert defaults["include_statistics"] is False


def test_structured_formats_show_timestamps_by_default():
    assert JSONRenderer().configuration["show_timestamps"] is True
    assert XMLRenderer().configuration["show_attributes"] is True
    assert TextRenderer().configuration["show_timestamps"] is False


@pytest.mark.parametrize("renderer_class", [TextRenderer, JSONRenderer, XMLRenderer])
def test_validate_configuration(renderer_class):
    renderer = renderer_class()
    assert renderer.validate_configuration(renderer.default_configuration())
    assert not renderer.validate_configuration({"pretty_print": True})
    assert not renderer.validate_configuration({**renderer.default_configuration(), "bogus": 1})
    assert not renderer.validate_configuration({**renderer.default_configuration(), "max_depth": -2})


def test_configuration_problems_lists_everything():
    renderer = JSONRenderer()
    problems = renderer.configuration_problems(
        {**renderer.default_configuration(), "property_case": "UPPER", "indent": "2", "extra": None}
    )
    assert len(problems) == 3
    assert "unknown key 'extra'" in problems


def test_invalid_construction():
    with pytest.raises(InvalidConfigurationError, match="Invalid text renderer configuration"):
        TextRenderer({"property_case": "camelCase"})
    with pytest.raises(InvalidConfigurationError):
        JSONRenderer({"null_handling": "drop"})
    with pytest.raises(InvalidConfigurationError):
        XMLRenderer({"datetime_format": ""})


def test_format_with_options_leaves_defaults_untouched(sample_tree):
    renderer = TextRenderer({"include_metadata": False})
    before = renderer.configuration

    renderer.format_with_options(sample_tree, {"show_size": False, "max_depth": 0})

    assert renderer.configuration == before
    assert "a.txt (1.00 KB)" in renderer.format(sample_tree)


def test_format_with_invalid_override_raises(sample_tree):
    with pytest.raises(InvalidConfigurationError):
        TextRenderer().format_with_options(sample_tree, {"pretty_print": "yes"})


def test_configuration_property_returns_copy():
    renderer = TextRenderer()
    renderer.configuration["show_size"] = False
    assert renderer.configuration["show_size"] is True


def test_render_depth_does_not_change_statistics(sample_tree):
    output = TextRenderer({"include_metadata": False, "include_statistics": True, "max_depth": 0}).format(sample_tree)
    assert output.splitlines()[0] == "root/"
    assert "  Total files: 4" in output
