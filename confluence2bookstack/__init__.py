"""
confluence2bookstack - Confluence HTML Export to BookStack Converter

Rewrites the pages of a Confluence space HTML export into HTML that the
BookStack WYSIWYG editor understands: callouts, collapsible sections,
inline images, checkboxes, author notes and code blocks. Whitespace is
normalized while preformatted code is kept byte-for-byte.
"""

__version__ = "1.0.0"
