"""Result type shared by the structured and textual pipelines."""

from dataclasses import dataclass


@dataclass
class TransformResult:
    """Outcome of one pipeline run over a document."""

    output: str
    style_found: bool = False
    rules_found: int = 0
    elements_styled: int = 0
    tags_renamed: int = 0

    @property
    def changed(self) -> bool:
        """True if the pipeline rewrote anything."""
        return self.style_found or self.tags_renamed > 0
