"""
Core data structures shared by the conversion pipeline.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


class ConversionError(Exception):
    """Raised when a document cannot be converted."""
    pass


class MissingAssetError(ConversionError):
    """Raised when an image referenced by a page cannot be read."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        message = f"Image not found: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


@dataclass
class Document:
    """A single exported page travelling through the pipeline."""
    source_path: Path
    text: str
    output_path: Optional[Path] = None
    title: Optional[str] = None
    warnings: list[str] = field(default_factory=list)
    images: dict = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.source_path.name

    @property
    def base_dir(self) -> Path:
        """Directory that relative asset paths are resolved against."""
        return self.source_path.parent

    def warn(self, message: str) -> None:
        """Record a diagnostic for this document and report it."""
        self.warnings.append(message)
        print(f"[WARN] {self.name}: {message}")


@dataclass
class ConversionSummary:
    """Outcome of a batch run over an export folder."""
    converted: list[Document] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def warning_count(self) -> int:
        return sum(len(doc.warnings) for doc in self.converted)

    @property
    def ok(self) -> bool:
        return not self.failed
