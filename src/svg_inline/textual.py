"""Regex-based conversion used when the document cannot be parsed as XML.

Works directly on the source text and mirrors the structured pipeline:
declarations of every styled class on a tag are merged (in rule order) with
the tag's own style attribute before a single style attribute is written.

Known limitations:
- only the first <style> block is read, although every block is removed;
- tags written with a namespace prefix (``<svg:path>``) are not renamed;
- markup inside comments or CDATA sections is rewritten like normal markup.
"""

import logging
import re

from .css import (
    ClassRules,
    format_inline_style,
    merge_declarations,
    parse_class_rules,
    parse_inline_style,
)
from .result import TransformResult
from .utils import ELEMENT_VOCABULARY, capitalize_tag

logger = logging.getLogger(__name__)

STYLE_BLOCK_RE = re.compile(r"<style\b[^>]*>(.*?)</style\s*>", re.DOTALL)
EMPTY_DEFS_RE = re.compile(r"<defs\b[^>]*>\s*</defs\s*>")
START_TAG_RE = re.compile(r"<([A-Za-z_][\w:.-]*)(\s[^<>]*?)?(/?)>")
CLASS_ATTR_RE = re.compile(r"(\s)class\s*=\s*\"([^\"]*)\"")
STYLE_ATTR_RE = re.compile(r"(\s)style\s*=\s*\"([^\"]*)\"")


def _escape_attr(value: str) -> str:
    return value.replace('"', "&quot;")


def _unescape_attr(value: str) -> str:
    return value.replace("&quot;", '"')


def _replace_spans(text: str, edits: list[tuple[tuple[int, int], str]]) -> str:
    """Apply non-overlapping (span, replacement) edits to text."""
    for (start, end), replacement in sorted(edits, reverse=True):
        text = text[:start] + replacement + text[end:]
    return text


def rewrite_start_tag(tag: str, rules: ClassRules) -> tuple[str, bool]:
    """Move styled classes of one start tag into its style attribute.

    Args:
        tag: Full start tag text, e.g. ``<path class="a b" d="M0 0"/>``.
        rules: Parsed class rules.

    Returns:
        Tuple of (rewritten tag, whether it changed).
    """
    class_match = CLASS_ATTR_RE.search(tag)
    if class_match is None:
        return tag, False

    tokens = class_match.group(2).split()
    styled = [name for name in rules if name in tokens]
    if not styled:
        return tag, False
    remaining = [token for token in tokens if token not in styled]

    style_match = STYLE_ATTR_RE.search(tag)
    existing = _unescape_attr(style_match.group(2)) if style_match else None
    properties = parse_inline_style(existing)
    for name in styled:
        merge_declarations(properties, rules[name])
    style_value = _escape_attr(format_inline_style(properties))

    lead = class_match.group(1)
    class_attr = f'{lead}class="{" ".join(remaining)}"' if remaining else ""
    if style_match is None and not properties:
        edits = [(class_match.span(), class_attr)]
    elif style_match is not None:
        edits = [
            (class_match.span(), class_attr),
            (style_match.span(), f'{style_match.group(1)}style="{style_value}"'),
        ]
    elif remaining:
        edits = [(class_match.span(), f'{class_attr} style="{style_value}"')]
    else:
        edits = [(class_match.span(), f'{lead}style="{style_value}"')]
    return _replace_spans(tag, edits), True


def apply_class_styles_text(text: str, rules: ClassRules) -> tuple[str, int]:
    """Rewrite every start tag that uses a styled class.

    Returns:
        Tuple of (new text, number of rewritten tags).
    """
    count = 0

    def _rewrite(match: re.Match) -> str:
        nonlocal count
        new_tag, changed = rewrite_start_tag(match.group(0), rules)
        if changed:
            count += 1
        return new_tag

    return START_TAG_RE.sub(_rewrite, text), count


def rename_tags_text(text: str) -> tuple[str, int]:
    """Capitalize opening and closing tags of vocabulary elements.

    Returns:
        Tuple of (new text, number of renamed start tags).
    """
    count = 0
    for name in ELEMENT_VOCABULARY:
        new_name = capitalize_tag(name)
        text, opened = re.subn(rf"<{name}(?=[\s/>])", f"<{new_name}", text)
        text = re.sub(rf"</{name}(\s*)>", rf"</{new_name}\1>", text)
        count += opened
    return text, count


def convert_textual(text: str, react_native: bool = False) -> TransformResult:
    """Convert class styles to inline styles with pattern matching.

    Args:
        text: SVG document text, possibly malformed.
        react_native: Capitalize vocabulary tag names.

    Returns:
        TransformResult holding the converted text. The input is returned
        unchanged when there is no style block and no renaming.
    """
    result = TransformResult(output=text)
    output = text

    style_match = STYLE_BLOCK_RE.search(text)
    if style_match is None:
        logger.info("No style element found in SVG. No inline conversion needed.")
    else:
        rules = parse_class_rules(style_match.group(1))
        result.style_found = True
        result.rules_found = len(rules)
        output = STYLE_BLOCK_RE.sub("", output)
        output, result.elements_styled = apply_class_styles_text(output, rules)
        output = EMPTY_DEFS_RE.sub("", output)

    if react_native:
        output, result.tags_renamed = rename_tags_text(output)

    result.output = output
    return result
