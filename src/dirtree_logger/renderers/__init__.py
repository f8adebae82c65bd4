"""Output formats for directory trees."""

from typing import Any, Dict, Mapping, Optional, Type

from .base_renderer import Renderer
from .json_renderer import JSONRenderer
from .text_renderer import TextRenderer
from .xml_renderer import XMLRenderer

RENDERERS: Dict[str, Type[Renderer]] = {
    TextRenderer.name: TextRenderer,
    JSONRenderer.name: JSONRenderer,
    XMLRenderer.name: XMLRenderer,
}


def get_renderer(name: str, configuration: Optional[Mapping[str, Any]] = None) -> Renderer:
    """Create the renderer registered under a format name.

    Args:
        name: One of ``text``, ``json`` or ``xml`` (case-insensitive).
        configuration: Partial configuration merged over the renderer's defaults.

    Raises:
        ValueError: If no renderer is registered under the name.
        InvalidConfigurationError: If the configuration is invalid.

    Example:
        >>> get_renderer("JSON").content_type
        'application/json'
    """
    try:
        renderer_class = RENDERERS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown output format '{name}'; expected one of {', '.join(RENDERERS)}") from None
    return renderer_class(configuration)


__all__ = ["JSONRenderer", "RENDERERS", "Renderer", "TextRenderer", "XMLRenderer", "get_renderer"]
