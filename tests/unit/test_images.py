"""
Unit tests for the image inliner.
"""

import base64

import pytest

from confluence2bookstack.document import MissingAssetError
from confluence2bookstack.stages.images import (
    PLACEHOLDER_RE,
    ImageInliner,
    ImageReference,
    register_image,
)
from fixtures import PNG_BYTES


class TestImageInliner:
    """Tests for ImageInliner.inline."""

    @pytest.fixture
    def page_dir(self, tmp_path):
        """Create a page directory with one image."""
        (tmp_path / "img").mkdir()
        (tmp_path / "img" / "diagram.png").write_bytes(PNG_BYTES)
        return tmp_path

    @pytest.fixture
    def images(self):
        return {}

    def test_inline_image(self, page_dir, images):
        """Test that a readable image becomes a base64 data tag."""
        text = "<p>" + register_image(images, "img/diagram.png", "100", "200") + "</p>"

        result = ImageInliner.inline(text, page_dir, images)

        encoded = base64.b64encode(PNG_BYTES).decode("ascii")
        assert result == f'<p><img src="data:image/png;base64,{encoded}" height="100" width="200"></p>'

    def test_size_attributes_omitted_when_empty(self, page_dir, images):
        """Test an image without declared dimensions."""
        result = ImageInliner.inline(register_image(images, "img/diagram.png"), page_dir, images)

        assert result.startswith('<img src="data:image/png;base64,')
        assert "height=" not in result
        assert "width=" not in result

    def test_percent_encoded_path(self, tmp_path, images):
        """Test that URL-encoded file names are resolved."""
        (tmp_path / "my diagram.png").write_bytes(PNG_BYTES)
        text = register_image(images, "my%20diagram.png", "1", "2")
        assert "base64," in ImageInliner.inline(text, tmp_path, images)

    def test_missing_image_reported_and_conversion_continues(self, page_dir, images):
        """Test that a missing file yields a broken image and a warning."""
        warnings = []
        text = (
            "<p>before</p>"
            + register_image(images, "img/missing.png", "10", "20")
            + register_image(images, "img/diagram.png", "100", "200")
            + "<p>after</p>"
        )

        result = ImageInliner.inline(text, page_dir, images, warn=warnings.append)

        assert '<img src="img/missing.png" alt="Missing image: img/missing.png" height="10" width="20">' in result
        assert "data:image/png;base64," in result
        assert result.startswith("<p>before</p>")
        assert result.endswith("<p>after</p>")
        assert len(warnings) == 1
        assert "missing.png" in warnings[0]

    def test_missing_image_without_callback_prints(self, page_dir, images, capsys):
        """Test that a missing image is printed when no callback is given."""
        ImageInliner.inline(register_image(images, "gone.png"), page_dir, images)
        assert "[WARN]" in capsys.readouterr().out

    def test_text_without_placeholders_unchanged(self, page_dir, images):
        """Test that other markup is left alone."""
        html = '<p><img src="http://example.com/x.png"></p>'
        assert ImageInliner.inline(html, page_dir, images) == html

    def test_literal_placeholder_text_unchanged(self, tmp_path, images):
        """Test that placeholder-like text written by the author is not resolved."""
        (tmp_path / "secret.txt").write_text("TOP-SECRET")
        page_dir = tmp_path / "sub"
        page_dir.mkdir()
        html = "<p>Docs: {{inline-image|../secret.txt||}}</p>"

        assert ImageInliner.inline(html, page_dir, images) == html

    def test_unregistered_token_unchanged(self, page_dir, images):
        """Test that a well-formed token from another page is left alone."""
        html = "<p><!--INLINE-IMAGE-" + "0" * 32 + "--></p>"
        warnings = []

        assert ImageInliner.inline(html, page_dir, images, warn=warnings.append) == html
        assert warnings == []

    def test_parent_directory_refused(self, tmp_path, images):
        """Test that an image outside the page folder is not read."""
        (tmp_path / "secret.txt").write_text("TOP-SECRET")
        page_dir = tmp_path / "sub"
        page_dir.mkdir()
        warnings = []

        result = ImageInliner.inline(
            register_image(images, "../secret.txt"), page_dir, images, warn=warnings.append
        )

        assert "base64" not in result
        assert result == '<img src="../secret.txt" alt="Missing image: ../secret.txt">'
        assert len(warnings) == 1
        assert "outside the export folder" in warnings[0]

    def test_absolute_path_refused(self, tmp_path, images):
        """Test that an absolute image path is not read."""
        outside = tmp_path / "outside.png"
        outside.write_bytes(PNG_BYTES)
        page_dir = tmp_path / "page"
        page_dir.mkdir()
        warnings = []

        result = ImageInliner.inline(
            register_image(images, str(outside)), page_dir, images, warn=warnings.append
        )

        assert "base64" not in result
        assert len(warnings) == 1


class TestRegisterImage:
    """Tests for register_image."""

    def test_tokens_are_unique(self):
        """Test that the same path registered twice gets two placeholders."""
        images = {}
        first = register_image(images, "a.png")
        second = register_image(images, "a.png")

        assert first != second
        assert len(images) == 2

    def test_placeholder_is_recorded(self):
        """Test that the placeholder maps back to its reference."""
        images = {}
        placeholder = register_image(images, "b/c.png", "1", "2")

        match = PLACEHOLDER_RE.fullmatch(placeholder)
        assert match is not None
        assert images[match.group("token")] == ImageReference("b/c.png", "1", "2")


class TestImageReference:
    """Tests for ImageReference."""

    def test_read_missing_raises(self, tmp_path):
        """Test that an unreadable file raises MissingAssetError."""
        with pytest.raises(MissingAssetError, match="Image not found"):
            ImageReference("nope.png").read_bytes(tmp_path)

    def test_directory_is_not_an_image(self, tmp_path):
        """Test that a directory in place of the file counts as missing."""
        (tmp_path / "folder.png").mkdir()
        with pytest.raises(MissingAssetError):
            ImageReference("folder.png").read_bytes(tmp_path)

    def test_resolve_relative_to_page(self, tmp_path):
        """Test path resolution against the page directory."""
        expected = tmp_path.resolve() / "attachments" / "1" / "2.png"
        assert ImageReference("attachments/1/2.png").resolve(tmp_path) == expected

    def test_resolve_outside_raises(self, tmp_path):
        """Test that climbing out of the page directory is refused."""
        with pytest.raises(MissingAssetError, match="outside the export folder"):
            ImageReference("../../etc/passwd").resolve(tmp_path)
