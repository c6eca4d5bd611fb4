"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import date
from pathlib import Path
import pytest

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from confluence2bookstack.core import Converter
from confluence2bookstack.stages.macros import MacroRewriter, RewriteContext
from fixtures.sample_exports import PNG_BYTES, SAMPLE_PAGE_HTML, UNTITLED_PAGE_HTML


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "integration: mark as integration test")


# ============================================================================
# Base Fixtures
# ============================================================================


@pytest.fixture
def conversion_date():
    """Provide a consistent conversion date for tests."""
    return date(2026, 10, 16)


@pytest.fixture
def context(conversion_date):
    """Create a rewrite context with a fixed conversion date."""
    return RewriteContext(converted_on=conversion_date, source_name="test.html")


@pytest.fixture
def rewriter():
    """Create a macro rewriter with the default rule table."""
    return MacroRewriter()


@pytest.fixture
def converter(conversion_date):
    """Create a converter with a fixed conversion date."""
    return Converter(today=conversion_date)


# ============================================================================
# Export Folder Fixtures
# ============================================================================


@pytest.fixture
def export_dir(tmp_path):
    """Create a space export with one page and one of its two attachments."""
    space = tmp_path / "ENG"
    attachments = space / "attachments" / "65540"
    attachments.mkdir(parents=True)
    (attachments / "98305.png").write_bytes(PNG_BYTES)
    (space / "Deploying-the-API_65540.html").write_text(SAMPLE_PAGE_HTML, encoding="utf-8")
    return space


@pytest.fixture
def untitled_page(tmp_path):
    """Create an export page without a <title>."""
    page = tmp_path / "98765.html"
    page.write_text(UNTITLED_PAGE_HTML, encoding="utf-8")
    return page
