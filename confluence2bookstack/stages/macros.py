"""
Macro Rewriter

Translates the markup Confluence emits for its macros (info panels,
expand sections, embedded images, emoji, page metadata, code blocks,
table of contents) into the equivalent BookStack editor markup.

The rules are text patterns over the known export format, not an HTML
parser. Markup that drifts from that format is left as it is, so a
construct that does not match shows up unconverted in the output.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional, Union

from .images import register_image


@dataclass
class RewriteContext:
    """Per-document state handed to every rule."""
    converted_on: date = field(default_factory=date.today)
    source_name: str = "<text>"
    warnings: list[str] = field(default_factory=list)
    images: dict = field(default_factory=dict)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        print(f"[WARN] {self.source_name}: {message}")


Replacement = Union[str, Callable[[re.Match, RewriteContext], str]]


@dataclass(frozen=True)
class RewriteRule:
    """A plain pattern -> replacement substitution."""
    name: str
    pattern: re.Pattern
    replacement: Replacement

    def apply(self, text: str, context: RewriteContext) -> str:
        if callable(self.replacement):
            return self.pattern.sub(lambda m: self.replacement(m, context), text)
        return self.pattern.sub(self.replacement, text)


@dataclass(frozen=True)
class BlockRule:
    """
    Rewrites a <div> container matched by its opening tag.

    The closing tag is found by counting nested <div>s, so bodies that
    contain their own containers (code panels, other macros) are captured
    whole. After each substitution the scan resumes at the start of the
    replacement, which converts nested and sequential blocks one at a
    time until none are left.
    """
    name: str
    opening: re.Pattern
    render: Callable[[re.Match, str, RewriteContext], Optional[str]]

    def apply(self, text: str, context: RewriteContext) -> str:
        pos = 0
        while True:
            match = self.opening.search(text, pos)
            if match is None:
                return text

            end = find_closing_div(text, match.end())
            if end is None:
                context.warn(f"unbalanced <div> in {self.name} macro, left unconverted")
                pos = match.end()
                continue

            inner = text[match.end():end - len("</div>")]
            replacement = self.render(match, inner, context)
            if replacement is None:
                context.warn(f"unrecognised {self.name} macro layout, left unconverted")
                pos = match.end()
                continue

            text = text[:match.start()] + replacement + text[end:]
            pos = match.start()


DIV_TAG_RE = re.compile(r"<(/?)div\b[^>]*>", re.IGNORECASE)


def find_closing_div(text: str, start: int) -> Optional[int]:
    """Return the end offset of the </div> closing a div opened before start."""
    depth = 1
    for tag in DIV_TAG_RE.finditer(text, start):
        if tag.group(1):
            depth -= 1
            if depth == 0:
                return tag.end()
        else:
            depth += 1
    return None


def _inner_div(text: str, opening: re.Pattern) -> Optional[tuple[str, int]]:
    """Find a child div by its opening tag; return (contents, start offset)."""
    match = opening.search(text)
    if match is None:
        return None
    end = find_closing_div(text, match.end())
    if end is None:
        return None
    return text[match.end():end - len("</div>")], match.start()


# ──────────────────────────────────────────────────────────────
# CALLOUTS (info / tip / note / warning macros)
# ──────────────────────────────────────────────────────────────

CALLOUT_STYLES = {
    "information": "info",
    "tip": "success",
    "note": "warning",
    "warning": "error",
}

CALLOUT_OPEN_RE = re.compile(
    r'<div class="(?=(?:[^"]*\s)?confluence-information-macro[\s"])'
    r'[^"]*?\bconfluence-information-macro-(?P<variant>[a-z]+)\b[^"]*"[^>]*>'
)
CALLOUT_BODY_RE = re.compile(r'<div class="confluence-information-macro-body[^"]*"[^>]*>')
CALLOUT_TITLE_RE = re.compile(r'<p class="title[^"]*">(?P<title>.*?)</p>', re.DOTALL)

PARAGRAPH_OPEN_RE = re.compile(r"<p\b[^>]*>", re.IGNORECASE)
PARAGRAPH_CLOSE_RE = re.compile(r"</p>", re.IGNORECASE)


def flatten_paragraphs(html: str) -> str:
    """Turn <p> blocks into runs of text separated by <br>."""
    html = PARAGRAPH_OPEN_RE.sub("", html)
    return PARAGRAPH_CLOSE_RE.sub("<br>", html)


def _render_callout(match: re.Match, inner: str, context: RewriteContext) -> Optional[str]:
    body = _inner_div(inner, CALLOUT_BODY_RE)
    if body is None:
        return None
    content, body_start = body

    variant = match.group("variant")
    style = CALLOUT_STYLES.get(variant)
    if style is None:
        context.warn(f"unknown callout variant '{variant}', styled as info")
        style = "info"

    heading = ""
    title = CALLOUT_TITLE_RE.search(inner, 0, body_start)
    if title and title.group("title"):
        heading = f"<strong>{title.group('title')}</strong><br>"

    return f'<p class="callout callout-{style}">{heading}{flatten_paragraphs(content)}</p>'


# ──────────────────────────────────────────────────────────────
# EXPAND (collapsible sections)
# ──────────────────────────────────────────────────────────────

EXPAND_OPEN_RE = re.compile(
    r'<div id="expander-(?P<id>\d+)" class="expand-container[^"]*"[^>]*>'
)
EXPAND_LABEL_RE = re.compile(
    r'<span class="expand-control-text[^"]*">(?P<label>.*?)</span>', re.DOTALL
)


def _render_expand(match: re.Match, inner: str, context: RewriteContext) -> Optional[str]:
    macro_id = match.group("id")
    label = EXPAND_LABEL_RE.search(inner)
    content_open = re.compile(
        rf'<div id="expander-content-{macro_id}" class="expand-content[^"]*"[^>]*>'
    )
    body = _inner_div(inner, content_open)
    if label is None or body is None:
        return None
    return f"<details><summary>{label.group('label')}</summary>{body[0]}</details>"


# ──────────────────────────────────────────────────────────────
# PLAIN SUBSTITUTIONS
# ──────────────────────────────────────────────────────────────

BREADCRUMBS_RE = re.compile(r'<div id="breadcrumb-section">.*?</div>', re.DOTALL)

PAGE_METADATA_RE = re.compile(
    r'<div class="page-metadata">\s*Created by '
    r"<span class=['\"]author['\"]>\s*(?P<author>.*?)\s*</span>"
    r"(?:, last modified by <span class=['\"]editor['\"]>\s*(?P<editor>.*?)\s*</span>)?"
    r",? (?:last modified )?on (?P<modified>[^<]*?)\s*</div>"
)

ATTACHMENTS_RE = re.compile(
    r'<div class="pageSection group"><div class="pageSectionHeader">'
    r'<h2 id="attachments"[^>]*>Attachments:</h2></div>'
    r'<div class="greybox"[^>]*>.*?</div></div>',
    re.DOTALL,
)

FOOTER_RE = re.compile(
    r'<div id="footer"[^>]*><section class="footer-body">.*?</section></div>', re.DOTALL
)

EMBEDDED_IMAGE_RE = re.compile(
    r'<span class="confluence-embedded-file-wrapper[^"]*"[^>]*>'
    r'<img\b(?=[^>]*?\ssrc="(?P<path>[^"?|]+)(?:\?[^"]*)?")'
    r'(?=(?:[^>]*?\sheight="(?P<height>\d*)")?)'
    r'(?=(?:[^>]*?\swidth="(?P<width>\d*)")?)'
    r"[^>]*></span>"
)

UNCHECKED_EMOJI_RE = re.compile(r'<img\b[^>]*\sdata-emoji-id="2b1c"[^>]*>', re.IGNORECASE)
CHECKED_EMOJI_RE = re.compile(r'<img\b[^>]*\sdata-emoji-id="2705"[^>]*>', re.IGNORECASE)

UNCHECKED_BOX = "☐"
CHECKED_BOX = "☑"

# Confluence syntaxhighlighter brush -> BookStack language class
CODE_LANGUAGES = {
    "powershell": "powershell",
    "bash": "bash",
    "py": "python",
    "python": "python",
    "sql": "sql",
    "js": "javascript",
    "javascript": "javascript",
    "java": "java",
    "xml": "xml",
    "html": "html",
    "yaml": "yaml",
    "json": "json",
    "csharp": "csharp",
    "c#": "csharp",
    "cpp": "cpp",
}

CODE_BLOCK_RE = re.compile(
    r'<pre class="syntaxhighlighter-pre" '
    r'data-syntaxhighlighter-params="brush: (?P<brush>[\w#+]+);[^"]*"[^>]*>'
)

TOC_OUTLINE_RE = re.compile(r'(<span class="TOCOutline">[^<]*</span>)')


def _page_metadata_note(match: re.Match, context: RewriteContext) -> str:
    modified = f"last modified by {match.group('editor')}" if match.group("editor") else "last modified"
    return (
        f"<p><em>Converted from Confluence on {context.converted_on:%Y-%m-%d}. "
        f"Originally created by {match.group('author')}, "
        f"{modified} on {match.group('modified')}.</em></p>"
    )


def _image_placeholder(match: re.Match, context: RewriteContext) -> str:
    return register_image(
        context.images, match.group("path"), match.group("height") or "", match.group("width") or ""
    )


def _code_language(match: re.Match, context: RewriteContext) -> str:
    language = CODE_LANGUAGES.get(match.group("brush").lower())
    if language is None:
        return match.group(0)
    return f'<pre class="language-{language}">'


DEFAULT_RULES = (
    RewriteRule("breadcrumbs", BREADCRUMBS_RE, ""),
    RewriteRule("page-metadata", PAGE_METADATA_RE, _page_metadata_note),
    RewriteRule("attachments", ATTACHMENTS_RE, ""),
    RewriteRule("footer", FOOTER_RE, ""),
    BlockRule("expand", EXPAND_OPEN_RE, _render_expand),
    BlockRule("callout", CALLOUT_OPEN_RE, _render_callout),
    RewriteRule("embedded-image", EMBEDDED_IMAGE_RE, _image_placeholder),
    RewriteRule("checkbox-unchecked", UNCHECKED_EMOJI_RE, UNCHECKED_BOX),
    RewriteRule("checkbox-checked", CHECKED_EMOJI_RE, CHECKED_BOX),
    RewriteRule("code-language", CODE_BLOCK_RE, _code_language),
    RewriteRule("toc-outline", TOC_OUTLINE_RE, r"\1 "),
)


class MacroRewriter:
    """Applies an ordered, immutable rule table to a document."""

    def __init__(self, rules=DEFAULT_RULES):
        self.rules = tuple(rules)

    def rewrite(self, text: str, context: Optional[RewriteContext] = None) -> str:
        context = context or RewriteContext()
        for rule in self.rules:
            text = rule.apply(text, context)
        return text
