"""SVG conversion entry points.

This module ties the two conversion pipelines together:
- structured: ElementTree based, used whenever the input parses
- textual: regex based fallback, used when the structured pipeline fails

Callers only see the converted text and a ConversionReport; the report tells
which pipeline produced the output.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import yaml

from .errors import ApplyFailure, ConversionError, FallbackFailure, ParseFailure
from .result import TransformResult
from .structured import convert_structured
from .textual import convert_textual
from .utils import read_svg_text, sanitize_data_names, write_text_atomic

logger = logging.getLogger(__name__)

# Pipeline names
MethodName = Literal["structured", "textual"]

DEFAULT_INLINE_SUFFIX = "-inline"
DEFAULT_REACT_NATIVE_SUFFIX = "-rn"


@dataclass
class ConvertOptions:
    """Conversion options.

    Attributes:
        react_native: Capitalize SVG tag names for react-native-svg.
        sanitize_data_names: Replace whitespace in data-name values with '_'.
        fallback: Use the textual pipeline when the structured one fails.
        inline_suffix: Output file suffix for plain inline conversion.
        react_native_suffix: Output file suffix when renaming tags.
    """

    react_native: bool = False
    sanitize_data_names: bool = True
    fallback: bool = True
    inline_suffix: str = DEFAULT_INLINE_SUFFIX
    react_native_suffix: str = DEFAULT_REACT_NATIVE_SUFFIX


@dataclass
class ConversionReport:
    """Result of converting one document."""

    method: MethodName
    result: TransformResult
    react_native: bool = False
    fallback_reason: str | None = None
    file_path: Path | None = None
    output_path: Path | None = None
    written: bool = False

    @property
    def used_fallback(self) -> bool:
        """True if the textual pipeline produced the output."""
        return self.method == "textual"

    @property
    def output(self) -> str:
        return self.result.output

    @property
    def changed(self) -> bool:
        return self.result.changed


def _expect_bool(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false, got {value!r}")
    return value


def parse_convert_config_file(config_path: Path) -> ConvertOptions:
    """Parse a YAML conversion config file.

    Example file::

        react_native: true
        sanitize_data_names: true
        fallback: true
        suffix:
          inline: -inline
          react_native: -rn

    All keys are optional.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Parsed ConvertOptions.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the config format is invalid.
    """
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return ConvertOptions()
    if not isinstance(data, dict):
        raise ValueError("Config file must be a YAML dictionary")

    options = ConvertOptions(
        react_native=_expect_bool(data, "react_native", False),
        sanitize_data_names=_expect_bool(data, "sanitize_data_names", True),
        fallback=_expect_bool(data, "fallback", True),
    )

    if "suffix" in data:
        suffix_data = data["suffix"]
        if not isinstance(suffix_data, dict):
            raise ValueError("'suffix' must be a dictionary")
        for key, attr in (("inline", "inline_suffix"), ("react_native", "react_native_suffix")):
            if key in suffix_data:
                value = suffix_data[key]
                if not isinstance(value, str) or not value:
                    raise ValueError(f"suffix.{key} must be a non-empty string")
                setattr(options, attr, value)

    return options


def derive_output_path(input_path: Path, options: ConvertOptions | None = None) -> Path:
    """Derive the default output path next to the input file.

    Example:
        >>> derive_output_path(Path("icons/logo.svg"))
        PosixPath('icons/logo-inline.svg')
    """
    if options is None:
        options = ConvertOptions()
    suffix = options.react_native_suffix if options.react_native else options.inline_suffix
    name = input_path.name
    base = name[: -len(".svg")] if name.endswith(".svg") else name
    return input_path.with_name(f"{base}{suffix}.svg")


def convert_svg_text(text: str, options: ConvertOptions | None = None) -> ConversionReport:
    """Convert class-based styles in SVG text to inline styles.

    The structured pipeline runs first. If it fails, the textual pipeline
    re-derives the output from the original input.

    Args:
        text: SVG document text.
        options: Conversion options.

    Returns:
        ConversionReport holding the output text.

    Raises:
        ParseFailure, ApplyFailure: If the structured pipeline fails and the
            fallback is disabled.
        FallbackFailure: If the textual pipeline fails.
    """
    if options is None:
        options = ConvertOptions()

    source = sanitize_data_names(text) if options.sanitize_data_names else text
    method: MethodName = "structured"
    fallback_reason = None

    try:
        result = convert_structured(source, react_native=options.react_native)
    except (ParseFailure, ApplyFailure) as e:
        if not options.fallback:
            raise
        logger.warning("Structured conversion failed (%s); trying fallback method", e)
        method = "textual"
        fallback_reason = str(e)
        try:
            result = convert_textual(source, react_native=options.react_native)
        except Exception as fallback_error:
            raise FallbackFailure(
                f"Fallback conversion also failed: {fallback_error}"
            ) from fallback_error

    if not result.changed:
        result.output = text
    return ConversionReport(
        method=method,
        result=result,
        react_native=options.react_native,
        fallback_reason=fallback_reason,
    )


def convert_svg_file(
    input_path: Path,
    output_path: Path | None = None,
    options: ConvertOptions | None = None,
    dry_run: bool = False,
) -> ConversionReport:
    """Convert an SVG file and write the result.

    The output is written atomically. When nothing needs converting, the
    input text is written unchanged.

    Args:
        input_path: Path to the SVG file.
        output_path: Output path (default: derived from input_path).
        options: Conversion options.
        dry_run: Convert without writing output.

    Returns:
        ConversionReport for the file.

    Raises:
        FileNotFoundError: If the input file does not exist.
        ConversionError: If conversion or writing the output fails.
    """
    if options is None:
        options = ConvertOptions()
    if output_path is None:
        output_path = derive_output_path(input_path, options)

    text = read_svg_text(input_path)
    report = convert_svg_text(text, options)
    report.file_path = input_path
    report.output_path = output_path

    if dry_run:
        return report

    try:
        write_text_atomic(output_path, report.output)
    except OSError as e:
        error_cls = FallbackFailure if report.used_fallback else ConversionError
        raise error_cls(f"Failed to write output {output_path}: {e}") from e
    report.written = True

    if report.react_native:
        logger.info("Converted SVG to React Native format: %s", output_path)
    else:
        logger.info("Converted SVG styles to inline: %s", output_path)
    return report


def format_conversion_report(report: ConversionReport) -> str:
    """Format conversion report as text.

    Args:
        report: Conversion report.

    Returns:
        Formatted text.
    """
    lines: list[str] = []
    lines.append(f"File: {report.file_path}")
    lines.append("")

    lines.append("=" * 60)
    lines.append("CONVERSION")
    lines.append("=" * 60)
    lines.append(f"Method: {report.method}")
    if report.fallback_reason:
        lines.append(f"  [WARNING] Fallback used: {report.fallback_reason}")
    lines.append(f"Style block found: {'yes' if report.result.style_found else 'no'}")
    lines.append(f"Class rules: {report.result.rules_found}")
    lines.append(f"Elements styled: {report.result.elements_styled}")
    if report.react_native:
        lines.append(f"Tags renamed: {report.result.tags_renamed}")
    lines.append("")

    lines.append("=" * 60)
    lines.append("SUMMARY")
    lines.append("=" * 60)
    if not report.changed:
        lines.append("No conversion needed; input copied unchanged.")
    elif report.react_native:
        lines.append("Converted SVG to React Native format.")
    else:
        lines.append("Converted SVG styles to inline.")

    if report.written:
        lines.append(f"Output written to: {report.output_path}")
    elif report.output_path is not None:
        lines.append(f"Output not written (dry run): {report.output_path}")

    return "\n".join(lines)
