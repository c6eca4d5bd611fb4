"""
Converter Core Engine

Walks a Confluence space export, runs every page through the conversion
pipeline and writes the result next to the source page:

    normalize whitespace -> rewrite macros -> inline images -> name output

Pages are converted one at a time. A page that fails is reported and
skipped; the rest of the export is still converted.
"""

import os
from datetime import date
from pathlib import Path
from typing import Optional

from .document import ConversionSummary, Document
from .stages.images import ImageInliner
from .stages.macros import DEFAULT_RULES, MacroRewriter, RewriteContext
from .stages.naming import OUTPUT_PREFIX, extract_title, name_for_title
from .stages.whitespace import WhitespaceNormalizer


SUPPORTED_EXTENSIONS = {".html"}


class Converter:
    """
    Confluence export to BookStack converter.

    The rule table is shared by every page converted with this instance;
    nothing else carries over from one page to the next.
    """

    def __init__(
        self,
        rules=DEFAULT_RULES,
        prefix: str = OUTPUT_PREFIX,
        dry_run: bool = False,
        today: Optional[date] = None,
    ):
        self.rewriter = MacroRewriter(rules)
        self.prefix = prefix
        self.dry_run = dry_run
        self.today = today

    def convert_text(self, text: str, source_path: Path | str) -> Document:
        """
        Run one page through the pipeline without touching the output file.

        Args:
            text: Raw export HTML
            source_path: Where the page was read from; images resolve
                relative to its directory

        Returns:
            The converted Document with its output path set
        """
        document = Document(source_path=Path(source_path), text=text)

        context = RewriteContext(
            converted_on=self.today or date.today(),
            source_name=document.name,
            warnings=document.warnings,
            images=document.images,
        )

        document.text = WhitespaceNormalizer.normalize(document.text)
        document.text = self.rewriter.rewrite(document.text, context)
        document.text = ImageInliner.inline(
            document.text, document.base_dir, document.images, warn=document.warn
        )

        document.title = extract_title(document.text)
        name, title_found = name_for_title(document.title, document.source_path, self.prefix)
        if not title_found:
            document.warn(f"no page title found, saving as '{name}'")
        document.output_path = document.base_dir / name
        return document

    def convert_file(self, file_path: Path | str, taken: Optional[set] = None) -> Document:
        """Convert a single export page and write the result beside it."""
        file_path = Path(file_path)
        print(f"[HTML] Converting: {file_path}")

        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()

        document = self.convert_text(text, file_path)
        if taken is not None:
            document.output_path = _unique_path(document.output_path, taken)
            taken.add(document.output_path)

        if not self.dry_run:
            with open(document.output_path, "w", encoding="utf-8") as f:
                f.write(document.text)
            print(f"[SAVED] {document.output_path}")
        else:
            print(f"[DRY RUN] Would save {document.output_path}")

        return document

    def convert_directory(self, dir_path: Path | str) -> ConversionSummary:
        """Convert every export page found under dir_path."""
        summary = ConversionSummary()
        taken: set = set()

        for file_path in self.find_pages(dir_path):
            try:
                summary.converted.append(self.convert_file(file_path, taken))
            except Exception as e:
                print(f"[ERROR] Failed to convert {file_path}: {e}")
                summary.failed[str(file_path)] = str(e)

        return summary

    def find_pages(self, dir_path: Path | str) -> list[Path]:
        """List export pages under dir_path, skipping earlier conversion output."""
        pages = []
        for root, _, files in os.walk(dir_path):
            for filename in files:
                _, ext = os.path.splitext(filename.lower())
                if ext not in SUPPORTED_EXTENSIONS or filename.startswith(self.prefix):
                    continue
                pages.append(Path(root) / filename)
        return sorted(pages)


def _unique_path(path: Path, taken: set) -> Path:
    """Append ' (2)', ' (3)', ... until the path was not produced earlier in this run."""
    candidate = path
    counter = 2
    while candidate in taken:
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        counter += 1
    return candidate
