"""Tree-based conversion of class styles to inline styles.

The structured pipeline parses the document with ElementTree and runs:
load -> extract class rules -> apply -> prune defs -> rename tags -> serialize.
Any failure is reported as ParseFailure or ApplyFailure so the caller can fall
back to the textual pipeline with the original input.
"""

import logging
import re
from xml.etree import ElementTree as ET

from .css import (
    ClassRules,
    format_inline_style,
    merge_declarations,
    parse_class_rules,
    parse_inline_style,
)
from .errors import ApplyFailure, ConversionError, ParseFailure
from .result import TransformResult
from .utils import (
    ELEMENT_VOCABULARY,
    SVG_NAMESPACES,
    capitalize_tag,
    get_class_tokens,
    get_local_name,
    get_namespace,
    is_element,
    iter_elements,
    register_namespaces,
    set_class_tokens,
)

logger = logging.getLogger(__name__)

# XML declaration, doctype and comments ahead of the root element
_PROLOG_RE = re.compile(
    r"\A\ufeff?(?:\s*(?:<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^\[>]*(?:\[.*?\])?\s*>))*\s*",
    re.DOTALL,
)
_XMLNS_RE = re.compile(r'xmlns:([A-Za-z_][\w.-]*)\s*=\s*"([^"]*)"')
_RESERVED_PREFIX_RE = re.compile(r"ns\d+$")

_RENAMEABLE = frozenset(ELEMENT_VOCABULARY)


def register_document_namespaces(text: str) -> None:
    """Register prefixes declared in the document so they survive serialization."""
    register_namespaces()
    for prefix, uri in _XMLNS_RE.findall(text):
        if prefix == "xml" or _RESERVED_PREFIX_RE.match(prefix):
            continue
        if uri in SVG_NAMESPACES.values():
            continue
        ET.register_namespace(prefix, uri)


def load_svg(text: str) -> tuple[ET.Element, str, str]:
    """Parse SVG text into an element tree.

    Comments and processing instructions inside the root are kept.

    Args:
        text: Full document text.

    Returns:
        Tuple of (root element, prolog text, trailing whitespace).

    Raises:
        ParseFailure: If the text is not well-formed XML.
    """
    prolog = _PROLOG_RE.match(text).group(0)
    epilog = text[len(text.rstrip()):]
    register_document_namespaces(text)
    parser = ET.XMLParser(
        target=ET.TreeBuilder(insert_comments=True, insert_pis=True)
    )
    try:
        root = ET.fromstring(text.lstrip("\ufeff"), parser=parser)
    except ET.ParseError as e:
        raise ParseFailure(f"Failed to parse SVG: {e}") from e
    return root, prolog, epilog


def build_parent_map(root: ET.Element) -> dict[ET.Element, ET.Element]:
    """Map every node in the tree to its parent element."""
    return {child: parent for parent in root.iter() for child in parent}


def find_style_element(
    root: ET.Element,
) -> tuple[ET.Element, ET.Element] | None:
    """Find the first style element inside a defs element.

    defs elements are searched in document order; the first one holding a
    style element wins.

    Args:
        root: Root SVG element.

    Returns:
        Tuple of (defs, style), or None if no defs contains a style element.
    """
    for defs in iter_elements(root):
        if get_local_name(defs.tag) != "defs":
            continue
        for style in iter_elements(defs):
            if style is not defs and get_local_name(style.tag) == "style":
                return defs, style
    return None


def apply_class_styles(root: ET.Element, rules: ClassRules) -> int:
    """Merge class declarations into the inline style of each element.

    Classes are processed in rule order and elements in document order.
    Consumed class tokens are removed; an emptied class attribute is dropped.

    Args:
        root: Root SVG element (modified in place).
        rules: Parsed class rules.

    Returns:
        Number of distinct elements that received declarations.
    """
    styled: set[int] = set()
    for class_name, pairs in rules.items():
        for element in iter_elements(root):
            tokens = get_class_tokens(element)
            if class_name not in tokens:
                continue
            existing = element.get("style")
            properties = merge_declarations(parse_inline_style(existing), pairs)
            if properties or existing is not None:
                element.set("style", format_inline_style(properties))
            set_class_tokens(element, [t for t in tokens if t != class_name])
            styled.add(id(element))
    return len(styled)


def remove_element(parent: ET.Element, element: ET.Element) -> None:
    """Remove an element from its parent, keeping its tail text in place."""
    if element.tail:
        index = list(parent).index(element)
        if index > 0:
            previous = parent[index - 1]
            previous.tail = (previous.tail or "") + element.tail
        else:
            parent.text = (parent.text or "") + element.tail
    parent.remove(element)


def prune_style_container(
    root: ET.Element, defs: ET.Element, style: ET.Element
) -> bool:
    """Remove the style element, then its defs if no child elements remain.

    Returns:
        True if the defs element was removed as well.
    """
    parents = build_parent_map(root)
    remove_element(parents[style], style)

    if any(is_element(child) for child in defs):
        return False
    defs_parent = parents.get(defs)
    if defs_parent is None:
        return False
    remove_element(defs_parent, defs)
    return True


def rename_tags(root: ET.Element) -> int:
    """Capitalize the tag of every vocabulary element in the tree.

    Targets are collected before any tag changes, so every depth is reached.
    Only bare tags and tags in the SVG namespace are renamed.

    Args:
        root: Root SVG element (modified in place).

    Returns:
        Number of renamed elements.
    """
    svg_ns = SVG_NAMESPACES["svg"]
    targets = [
        element
        for element in iter_elements(root)
        if get_local_name(element.tag) in _RENAMEABLE
        and get_namespace(element.tag) in (None, svg_ns)
    ]
    for element in targets:
        new_name = capitalize_tag(get_local_name(element.tag))
        namespace = get_namespace(element.tag)
        element.tag = new_name if namespace is None else f"{{{namespace}}}{new_name}"
    return len(targets)


def serialize_svg(root: ET.Element, prolog: str = "", epilog: str = "") -> str:
    """Serialize the tree back to text, wrapped in the original prolog."""
    return prolog + ET.tostring(root, encoding="unicode") + epilog


def transform_tree(root: ET.Element, react_native: bool = False) -> TransformResult:
    """Run the in-memory stages of the structured pipeline.

    The returned result has an empty ``output``; serialization is left to the
    caller.
    """
    result = TransformResult(output="")

    found = find_style_element(root)
    if found is None:
        logger.info("No style element found in defs. No inline conversion needed.")
    else:
        defs, style = found
        rules = parse_class_rules("".join(style.itertext()))
        result.style_found = True
        result.rules_found = len(rules)
        result.elements_styled = apply_class_styles(root, rules)
        if prune_style_container(root, defs, style):
            logger.debug("Removed empty defs element")
        logger.debug(
            "Applied %d class rule(s) to %d element(s)",
            result.rules_found,
            result.elements_styled,
        )

    if react_native:
        result.tags_renamed = rename_tags(root)
        logger.debug("Renamed %d element(s)", result.tags_renamed)

    return result


def convert_structured(text: str, react_native: bool = False) -> TransformResult:
    """Convert class styles to inline styles using a parsed element tree.

    When nothing is rewritten the input text is returned unchanged.

    Args:
        text: SVG document text.
        react_native: Capitalize vocabulary tag names.

    Returns:
        TransformResult holding the converted text.

    Raises:
        ParseFailure: If the document cannot be parsed.
        ApplyFailure: If a later stage fails.
    """
    root, prolog, epilog = load_svg(text)
    try:
        result = transform_tree(root, react_native=react_native)
        result.output = serialize_svg(root, prolog, epilog) if result.changed else text
    except ConversionError:
        raise
    except Exception as e:
        raise ApplyFailure(f"Structured conversion failed: {e}") from e
    return result
