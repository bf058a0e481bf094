"""
Summary email document.

An append-only list of per-bookmark HTML fragments under a fixed header.
Each fragment shows the title (linked to the URL), either the generated
summary or an error notice, and the date the bookmark was saved.
"""

import html
from typing import List

from bs4 import BeautifulSoup

from .models import Bookmark

HEADER = '<h2>Your Bookmarked Content Summary</h2>'

FRAGMENT_TEMPLATE = """
<div style="margin-bottom: 30px; padding: 20px; border: 1px solid #eee; border-radius: 8px;">
  <h3 style="margin-top: 0; color: #2c3e50;">
    <a href="{url}" style="color: #3498db; text-decoration: none;">{title}</a>
  </h3>
  <p style="color: {color};">{body}</p>
  <small style="color: #7f8c8d;">Bookmarked on: {date}</small>
</div>
"""

TEXT_COLOR = '#34495e'
ERROR_COLOR = '#e74c3c'


def _render_body(text: str) -> str:
    return html.escape(text or '').replace('\n', '<br>')


class SummaryDocument:
    """HTML summary built up one bookmark at a time."""

    def __init__(self, header: str = HEADER):
        self.header = header
        self.fragments: List[str] = []

    def __len__(self) -> int:
        return len(self.fragments)

    def _append(self, bookmark: Bookmark, title: str, body: str, color: str) -> None:
        self.fragments.append(FRAGMENT_TEMPLATE.format(
            url=html.escape(bookmark.url, quote=True),
            title=html.escape(title or 'Untitled'),
            color=color,
            body=body,
            date=html.escape(bookmark.formatted_date()),
        ))

    def add_summary(self, bookmark: Bookmark, title: str, summary: str) -> None:
        self._append(bookmark, title, _render_body(summary), TEXT_COLOR)

    def add_fetch_error(self, bookmark: Bookmark, title: str, message: str) -> None:
        self._append(bookmark, title, _render_body(f"Unable to fetch content: {message}"), ERROR_COLOR)

    def add_generation_error(self, bookmark: Bookmark, title: str, message: str) -> None:
        self._append(bookmark, title, _render_body(f"Unable to generate summary: {message}"), ERROR_COLOR)

    def to_html(self) -> str:
        return self.header + ''.join(self.fragments)

    def to_text(self) -> str:
        """Plain-text rendering for the email's text part."""
        soup = BeautifulSoup(self.to_html(), 'html.parser')
        lines = [line.strip() for line in soup.get_text(separator='\n').split('\n')]
        return '\n'.join(line for line in lines if line)
