"""
Image Inliner

Replaces the image placeholders left by the macro rewriter with <img>
tags carrying the picture as base64 data, so the converted page no
longer depends on the export's attachments folder.

Each embedded image is registered under a fresh uuid4 token when the
rewriter meets it. Only tokens registered for the current page are
resolved, so text that merely looks like a placeholder is left alone.
"""

import base64
import re
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote

from ..document import MissingAssetError


IMAGE_MEDIA_TYPE = "image/png"

PLACEHOLDER_TEMPLATE = "<!--INLINE-IMAGE-{token}-->"
PLACEHOLDER_RE = re.compile(r"<!--INLINE-IMAGE-(?P<token>[0-9a-f]{32})-->")


@dataclass(frozen=True)
class ImageReference:
    """An attachment picture referenced from a page."""
    path: str
    height: str = ""
    width: str = ""
    token: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False)

    @property
    def placeholder(self) -> str:
        return PLACEHOLDER_TEMPLATE.format(token=self.token)

    def resolve(self, base_dir: Path) -> Path:
        """Return the file the image points at; it must lie under base_dir."""
        root = base_dir.resolve()
        file_path = (root / unquote(self.path)).resolve()
        if not file_path.is_relative_to(root):
            raise MissingAssetError(file_path, "outside the export folder")
        return file_path

    def read_bytes(self, base_dir: Path) -> bytes:
        file_path = self.resolve(base_dir)
        try:
            with open(file_path, "rb") as f:
                return f.read()
        except OSError as e:
            raise MissingAssetError(file_path, e.strerror or type(e).__name__) from e

    def size_attributes(self) -> str:
        attrs = ""
        if self.height:
            attrs += f' height="{self.height}"'
        if self.width:
            attrs += f' width="{self.width}"'
        return attrs

    def to_data_tag(self, data: bytes) -> str:
        encoded = base64.b64encode(data).decode("ascii")
        return f'<img src="data:{IMAGE_MEDIA_TYPE};base64,{encoded}"{self.size_attributes()}>'

    def to_broken_tag(self) -> str:
        return f'<img src="{self.path}" alt="Missing image: {self.path}"{self.size_attributes()}>'


def register_image(images: dict, path: str, height: str = "", width: str = "") -> str:
    """Record an image for the page being converted and return its placeholder."""
    ref = ImageReference(path, height, width)
    images[ref.token] = ref
    return ref.placeholder


class ImageInliner:
    """Resolves image placeholders against the page's own directory."""

    @staticmethod
    def inline(
        text: str,
        base_dir: Path,
        images: dict,
        warn: Optional[Callable[[str], None]] = None,
    ) -> str:
        """
        Replace every registered image placeholder in text.

        An unreadable file, or one outside the page's folder, does not stop
        the conversion: the image becomes a visibly broken <img> pointing
        at the original path and the problem is passed to warn.

        Args:
            text: Rewritten page markup
            base_dir: Directory containing the page being converted
            images: Token -> ImageReference map filled by the rewriter
            warn: Called with a message for each missing image

        Returns:
            The markup with every registered placeholder resolved
        """
        def _replace(match: re.Match) -> str:
            ref = images.get(match.group("token"))
            if ref is None:
                return match.group(0)
            try:
                data = ref.read_bytes(base_dir)
            except MissingAssetError as e:
                if warn is not None:
                    warn(str(e))
                else:
                    print(f"[WARN] {e}")
                return ref.to_broken_tag()
            return ref.to_data_tag(data)

        return PLACEHOLDER_RE.sub(_replace, text)
