"""
Title processing utilities for the bookmark summary.

Bookmark titles supplied by the browser are used as-is. When a bookmark has
no title, the fetched page's <title> is used instead, which needs cleanup:
1. Control characters and odd symbols removed
2. Whitespace normalized
3. Truncated at a word boundary (not mid-word) to 70 characters
"""

import re
from typing import Optional, Tuple

MAX_TITLE_LENGTH = 70
UNTITLED = 'Untitled'
TRAILING_SEPARATORS = ' |-:;,'


def truncate_title(title: str, max_length: int = MAX_TITLE_LENGTH) -> Tuple[str, bool]:
    """
    Shorten a page title to max_length without cutting a word in half.

    Page titles often end in a site suffix ("Post | Blog"), so a cut that
    lands just after a separator drops the dangling separator too.

    Returns:
        Tuple of (title, was_truncated)

    Examples:
        >>> truncate_title("Understanding Decorators | Real Python", 26)
        ('Understanding Decorators', True)
    """
    if not title:
        return ('', False)

    title = ' '.join(title.split())
    if len(title) <= max_length:
        return (title, False)

    # A space right at the limit still keeps the preceding word
    cut = title[:max_length + 1].rfind(' ')
    if cut <= 0:
        return (title[:max_length - 3] + '...', True)

    return (title[:cut].rstrip(TRAILING_SEPARATORS) or title[:cut], True)


def sanitize_title(title: str) -> str:
    """
    Sanitize a scraped title for display.

    - Removes null bytes and control characters
    - Keeps letters, numbers, spaces, and common punctuation
    - Normalizes whitespace
    """
    if not title:
        return ''

    title = re.sub(r'[\x00-\x1f\x7f-\x9f]', ' ', title)
    title = ''.join(c for c in title if c.isalnum() or c.isspace() or c in '.,!?-:;\'\"()[]&|')
    return ' '.join(title.split())


def clean_page_title(raw_title: Optional[str]) -> str:
    """Sanitize and truncate a page <title>. Empty string when nothing usable remains."""
    cleaned = sanitize_title(raw_title or '')
    if not re.search(r'\w', cleaned):
        return ''
    return truncate_title(cleaned)[0]


def resolve_title(bookmark_title: Optional[str], page_title: Optional[str] = None) -> str:
    """Bookmark title first, then the cleaned page title, then 'Untitled'."""
    if bookmark_title and bookmark_title.strip():
        return ' '.join(bookmark_title.split())
    return clean_page_title(page_title) or UNTITLED
