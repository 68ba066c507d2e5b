"""Utility functions for SVG parsing, naming and file handling."""

import os
import re
import tempfile
from pathlib import Path
from typing import Iterator
from xml.etree import ElementTree as ET

# SVG namespace mappings
SVG_NAMESPACES = {
    "svg": "http://www.w3.org/2000/svg",
    "inkscape": "http://www.inkscape.org/namespaces/inkscape",
    "sodipodi": "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd",
    "xlink": "http://www.w3.org/1999/xlink",
}

# Elements renamed to their capitalized form for react-native-svg
ELEMENT_VOCABULARY: tuple[str, ...] = (
    "svg",
    "circle",
    "ellipse",
    "g",
    "text",
    "tspan",
    "line",
    "path",
    "polygon",
    "polyline",
    "rect",
    "use",
    "defs",
    "stop",
    "linearGradient",
    "radialGradient",
    "mask",
    "pattern",
    "clipPath",
    "filter",
    "feGaussianBlur",
    "feOffset",
    "feBlend",
    "feColorMatrix",
)

_DATA_NAME_RE = re.compile(r'data-name="([^"]+)"')
_WHITESPACE_RE = re.compile(r"\s+")


def register_namespaces() -> None:
    """Register SVG namespaces to preserve prefixes when writing.

    The SVG namespace is registered as the default namespace so that
    serialized elements keep their bare tag names.
    """
    for prefix, uri in SVG_NAMESPACES.items():
        ET.register_namespace("" if prefix == "svg" else prefix, uri)


def get_local_name(tag: str) -> str:
    """Extract local name from a namespaced tag.

    Args:
        tag: Full tag name, possibly with namespace.

    Returns:
        Local name without namespace prefix.

    Example:
        >>> get_local_name("{http://www.w3.org/2000/svg}rect")
        'rect'
    """
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def get_namespace(tag: str) -> str | None:
    """Return the namespace URI of a tag, or None for a bare tag."""
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def capitalize_tag(name: str) -> str:
    """Uppercase the first character of a tag name, keeping the rest.

    Example:
        >>> capitalize_tag("linearGradient")
        'LinearGradient'
    """
    return name[:1].upper() + name[1:]


def is_element(node: ET.Element) -> bool:
    """Check if a node is an element (not a comment or processing instruction)."""
    return isinstance(node.tag, str)


def iter_elements(root: ET.Element) -> Iterator[ET.Element]:
    """Iterate over all elements in document order, skipping comments and PIs."""
    for node in root.iter():
        if is_element(node):
            yield node


def get_class_tokens(element: ET.Element) -> list[str]:
    """Get the CSS class tokens of an element in attribute order."""
    return element.get("class", "").split()


def set_class_tokens(element: ET.Element, tokens: list[str]) -> None:
    """Set the class tokens of an element, dropping the attribute when empty."""
    if tokens:
        element.set("class", " ".join(tokens))
    elif "class" in element.attrib:
        del element.attrib["class"]


def sanitize_data_names(text: str) -> str:
    """Replace whitespace runs inside data-name attribute values with '_'.

    Example:
        >>> sanitize_data_names('<g data-name="Layer 1"/>')
        '<g data-name="Layer_1"/>'
    """
    return _DATA_NAME_RE.sub(
        lambda m: f'data-name="{_WHITESPACE_RE.sub("_", m.group(1))}"', text
    )


def read_svg_text(file_path: Path) -> str:
    """Read an SVG file as UTF-8 text, keeping line endings as they are.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text_atomic(file_path: Path, content: str) -> None:
    """Write text to a file via a temporary sibling file and a rename.

    Either the complete content ends up at ``file_path`` or the file is left
    untouched; the temporary file is removed on failure.
    """
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{file_path.name}.", suffix=".tmp", dir=file_path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, file_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
