"""SVG Inline - Convert class-based SVG styles to inline styles."""

__version__ = "0.1.0"

from .css import (
    parse_class_rules,
    parse_declarations,
    parse_inline_style,
    format_inline_style,
)
from .errors import (
    ConversionError,
    ParseFailure,
    ApplyFailure,
    FallbackFailure,
)
from .structured import (
    convert_structured,
    rename_tags,
)
from .textual import (
    convert_textual,
    rename_tags_text,
)
from .convert import (
    ConversionReport,
    ConvertOptions,
    parse_convert_config_file,
    derive_output_path,
    convert_svg_text,
    convert_svg_file,
    format_conversion_report,
)
from .utils import ELEMENT_VOCABULARY

__all__ = [
    # CSS
    "parse_class_rules",
    "parse_declarations",
    "parse_inline_style",
    "format_inline_style",
    # Errors
    "ConversionError",
    "ParseFailure",
    "ApplyFailure",
    "FallbackFailure",
    # Pipelines
    "convert_structured",
    "rename_tags",
    "convert_textual",
    "rename_tags_text",
    # Conversion
    "ConversionReport",
    "ConvertOptions",
    "parse_convert_config_file",
    "derive_output_path",
    "convert_svg_text",
    "convert_svg_file",
    "format_conversion_report",
    # Vocabulary
    "ELEMENT_VOCABULARY",
]
