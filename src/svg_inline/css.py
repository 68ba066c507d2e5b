"""Parsing of the restricted CSS subset found in SVG style blocks.

Only simple class rules are understood::

    .st0 { fill: #fff; stroke: #000; }

Selectors with combinators, pseudo-classes or at-rules are not supported.
Braces inside declaration values and CSS comments are not handled either;
their presence gives undefined results.
"""

import re

# Class name -> ordered (property, value) pairs
ClassRules = dict[str, list[tuple[str, str]]]

CLASS_RULE_RE = re.compile(r"\.([^{]+)\{([^}]+)\}")

# One declaration of a style attribute; ';' inside (...) or quotes does not end it
STYLE_FRAGMENT_RE = re.compile(r"""(?:[^;("']|\([^)]*\)?|"[^"]*"?|'[^']*'?)+""")


def _split_pairs(fragments: list[str]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for fragment in fragments:
        fragment = fragment.strip()
        if not fragment or ":" not in fragment:
            continue
        name, value = fragment.split(":", 1)
        pairs.append((name.strip(), value.strip()))
    return pairs


def parse_declarations(body: str) -> list[tuple[str, str]]:
    """Split a declaration block into (property, value) pairs.

    Args:
        body: Text between the braces of a rule.

    Returns:
        Pairs in source order. Empty fragments and fragments without a
        colon are skipped.

    Example:
        >>> parse_declarations("fill: red; stroke:blue;")
        [('fill', 'red'), ('stroke', 'blue')]
    """
    return _split_pairs(body.split(";"))


def parse_class_rules(style_text: str) -> ClassRules:
    """Parse class rules from the text content of a style element.

    A class declared more than once keeps all of its pairs, later ones after
    earlier ones, so applying them in order gives last-write-wins per property.

    Args:
        style_text: Raw style block text.

    Returns:
        Mapping of class name to its declarations, in first-seen order.
        Empty when no rule is found.
    """
    rules: ClassRules = {}
    for match in CLASS_RULE_RE.finditer(style_text):
        class_name = match.group(1).strip()
        rules.setdefault(class_name, []).extend(
            parse_declarations(match.group(2).strip())
        )
    return rules


def parse_inline_style(style: str | None) -> dict[str, str]:
    """Parse a style attribute into an ordered property mapping.

    Semicolons inside parentheses or quotes belong to the value, so
    ``url(data:image/png;base64,...)`` stays in one piece.

    Example:
        >>> parse_inline_style("filter:url(a;b);fill:red")
        {'filter': 'url(a;b)', 'fill': 'red'}
    """
    if not style:
        return {}
    return dict(_split_pairs(STYLE_FRAGMENT_RE.findall(style)))


def format_inline_style(properties: dict[str, str]) -> str:
    """Format a property mapping as a style attribute value.

    Example:
        >>> format_inline_style({"fill": "red", "stroke": "blue"})
        'fill:red;stroke:blue;'
    """
    return "".join(f"{name}:{value};" for name, value in properties.items())


def merge_declarations(
    properties: dict[str, str], pairs: list[tuple[str, str]]
) -> dict[str, str]:
    """Layer pairs onto a property mapping in place; later writes win."""
    for name, value in pairs:
        properties[name] = value
    return properties
