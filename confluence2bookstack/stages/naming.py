"""
Title Extractor / Output Namer

Derives the output file name from the page title Confluence writes
into <title> as "Space Name : Page Title".
"""

import re
from pathlib import Path
from typing import Optional


OUTPUT_PREFIX = "CONVERTED - "
OUTPUT_SUFFIX = ".html"
FALLBACK_NAME = "untitled"

UNSAFE_CHARS_RE = re.compile(r"[^\w\s-]")
WHITESPACE_RUN_RE = re.compile(r"\s+")


def extract_title(html: str) -> Optional[str]:
    """Return the page part of the document title, or None if there is none."""
    try:
        from bs4 import BeautifulSoup
    except ImportError:
        raise RuntimeError("beautifulsoup4 is not installed. Run: pip install beautifulsoup4")

    soup = BeautifulSoup(html, "html.parser")
    title_tag = soup.find("title")
    if title_tag is None:
        return None

    title = title_tag.get_text(strip=True)
    if ":" in title:
        title = title.split(":", 1)[1]
    title = title.strip()
    return title or None


def sanitize_title(title: str) -> str:
    """Reduce a title to word characters joined by hyphens."""
    title = UNSAFE_CHARS_RE.sub("", title)
    title = WHITESPACE_RUN_RE.sub("-", title.strip())
    return title.strip("-")


def output_name(html: str, source_path: Path, prefix: str = OUTPUT_PREFIX) -> tuple[str, bool]:
    """
    Build the output file name for a converted page.

    Returns:
        (file name, whether a usable title was found). Without a title the
        name is built from the source file's stem instead.
    """
    return name_for_title(extract_title(html), source_path, prefix)


def name_for_title(
    title: Optional[str], source_path: Path, prefix: str = OUTPUT_PREFIX
) -> tuple[str, bool]:
    """Build the output file name from an already extracted title."""
    safe = sanitize_title(title) if title else ""
    if safe:
        return f"{prefix}{safe}{OUTPUT_SUFFIX}", True

    fallback = sanitize_title(Path(source_path).stem) or FALLBACK_NAME
    return f"{prefix}{fallback}{OUTPUT_SUFFIX}", False
