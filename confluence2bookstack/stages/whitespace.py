"""
Whitespace Normalizer

Collapses the pretty-printed whitespace of a Confluence export so the
markup pastes cleanly into a rich-text editor, while the contents of
every <pre> block survive byte-for-byte.
"""

import re
import uuid
from dataclasses import dataclass


PRE_BLOCK_RE = re.compile(r"<pre\b.*?</pre>", re.IGNORECASE | re.DOTALL)

# Placeholders carry a uuid4 hex token; only the exact 32-char form is restored.
# Written as a comment so the tag-gap rules treat it like the <pre> it replaces.
PLACEHOLDER_TEMPLATE = "<!--PRESERVED-{token}-->"
PLACEHOLDER_RE = re.compile(r"<!--PRESERVED-(?P<token>[0-9a-f]{32})-->")

NEWLINE_RE = re.compile(r"\r\n|\r|\n")
WHITESPACE_RUN_RE = re.compile(r"\s+")
BETWEEN_TAGS_RE = re.compile(r">\s+<")
# Inline void tags keep the space that separates them from the next word
AFTER_OPEN_TAG_RE = re.compile(r"(<(?!img\b|input\b)[^/!>][^>]*>) ", re.IGNORECASE)
BEFORE_CLOSE_TAG_RE = re.compile(r" (</)")


def escape_template(text: str) -> str:
    """Escape backslashes so the text is inert inside a regex template."""
    return text.replace("\\", "\\\\")


def unescape_template(text: str) -> str:
    """Inverse of escape_template."""
    return text.replace("\\\\", "\\")


@dataclass(frozen=True)
class ProtectedRegion:
    """A <pre> block lifted out of the text while whitespace is collapsed."""
    token: str
    escaped: str

    @classmethod
    def protect(cls, content: str) -> "ProtectedRegion":
        return cls(token=uuid.uuid4().hex, escaped=escape_template(content))

    @property
    def placeholder(self) -> str:
        return PLACEHOLDER_TEMPLATE.format(token=self.token)

    @property
    def content(self) -> str:
        return unescape_template(self.escaped)


class WhitespaceNormalizer:
    """Collapses whitespace outside <pre> blocks."""

    @staticmethod
    def normalize(text: str) -> str:
        regions: dict[str, ProtectedRegion] = {}

        def _protect(match: re.Match) -> str:
            region = ProtectedRegion.protect(match.group(0))
            regions[region.token] = region
            return region.placeholder

        working = PRE_BLOCK_RE.sub(_protect, text)
        working = collapse_whitespace(working)
        return _restore(working, regions)


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs and strip the gaps around tag brackets."""
    text = NEWLINE_RE.sub(" ", text)
    text = WHITESPACE_RUN_RE.sub(" ", text)
    text = BETWEEN_TAGS_RE.sub("><", text)
    text = AFTER_OPEN_TAG_RE.sub(r"\1", text)
    text = BEFORE_CLOSE_TAG_RE.sub(r"\1", text)
    return text.strip()


def _restore(text: str, regions: dict[str, ProtectedRegion]) -> str:
    def _replace(match: re.Match) -> str:
        region = regions.get(match.group("token"))
        if region is None:
            return match.group(0)
        return region.content

    # Single pass: restored content is never rescanned for placeholders
    return PLACEHOLDER_RE.sub(_replace, text)
