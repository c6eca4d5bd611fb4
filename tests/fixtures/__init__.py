# Test fixtures
from .sample_exports import (
    INFO_MACRO,
    TITLED_WARNING_MACRO,
    EXPAND_MACRO,
    EMBEDDED_IMAGE,
    UNCHECKED_EMOJI,
    CHECKED_EMOJI,
    SMILE_EMOJI,
    POWERSHELL_CODE,
    SAMPLE_PAGE_HTML,
    UNTITLED_PAGE_HTML,
    PNG_BYTES,
)

__all__ = [
    "INFO_MACRO",
    "TITLED_WARNING_MACRO",
    "EXPAND_MACRO",
    "EMBEDDED_IMAGE",
    "UNCHECKED_EMOJI",
    "CHECKED_EMOJI",
    "SMILE_EMOJI",
    "POWERSHELL_CODE",
    "SAMPLE_PAGE_HTML",
    "UNTITLED_PAGE_HTML",
    "PNG_BYTES",
]
