from .whitespace import WhitespaceNormalizer
from .macros import MacroRewriter, RewriteContext, DEFAULT_RULES
from .images import ImageInliner
from .naming import output_name

__all__ = ["WhitespaceNormalizer", "MacroRewriter", "RewriteContext", "DEFAULT_RULES", "ImageInliner", "output_name"]
