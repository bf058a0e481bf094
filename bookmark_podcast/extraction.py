"""
Content extraction for bookmarked pages.

Fetches a URL with a browser-like request, retries transient failures with a
linear backoff, and reduces the HTML to de-noised plain text:
- Tries content-region selectors in priority order
- Strips scripts, navigation, ads, comments and social widgets
- Falls back to the page body when no region has enough text
- Normalizes whitespace and punctuation noise

Callers truncate the text before sending it to Gemini.
"""

import re
import time
from typing import Callable, List, Optional

import requests
from bs4 import BeautifulSoup

from .errors import ExtractionError, FetchError
from .models import ExtractedContent
from .title_utils import resolve_title

USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
REQUEST_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
    'Connection': 'keep-alive',
}
FETCH_TIMEOUT = 15  # seconds
MAX_FETCH_ATTEMPTS = 3
FETCH_BACKOFF_SECONDS = 1.0

# Content regions, most specific first
CONTENT_SELECTORS = [
    'article', '.article', '.post', '.entry', 'main', '.content', '.post-content',
    '.entry-content', '#content', '.main-content', '.article-content',
    '.story-content', '.post-body', '.entry-body',
]
NOISE_SELECTOR = (
    'script, style, noscript, nav, footer, header, aside, .ads, .comments, '
    '.sidebar, .related, .share, .social, .menu, .navigation'
)
MIN_REGION_LENGTH = 100
MIN_CONTENT_LENGTH = 50


def _describe_request_error(error: requests.exceptions.RequestException) -> str:
    if isinstance(error, requests.exceptions.Timeout):
        return 'Request timed out'
    if isinstance(error, requests.exceptions.HTTPError) and error.response is not None:
        return f'HTTP error: {error.response.status_code}'
    return f'Request failed: {str(error)}'


def fetch_webpage(url: str,
                  max_attempts: int = MAX_FETCH_ATTEMPTS,
                  backoff: float = FETCH_BACKOFF_SECONDS,
                  sleep: Callable[[float], None] = time.sleep) -> str:
    """
    Fetch webpage HTML, retrying with linear backoff (1s, 2s, ...).

    Raises:
        FetchError: after the last attempt fails (network, timeout or non-2xx)
    """
    last_error = None

    for attempt in range(1, max_attempts + 1):
        try:
            response = requests.get(url, headers=REQUEST_HEADERS, timeout=FETCH_TIMEOUT,
                                    allow_redirects=True)
            response.raise_for_status()
            return response.text
        except requests.exceptions.RequestException as e:
            last_error = _describe_request_error(e)
            if attempt == max_attempts:
                break
            print(f"Retry {attempt}/{max_attempts} for {url} ({last_error})")
            sleep(backoff * attempt)

    raise FetchError(last_error, attempts=max_attempts)


def normalize_text(text: str) -> str:
    """Collapse whitespace and replace punctuation noise with spaces."""
    if not text:
        return ''
    text = re.sub(r'[^\w\s.,!?-]', ' ', text)
    return re.sub(r'\s+', ' ', text).strip()


def _strip_noise(element) -> None:
    for noise in element.select(NOISE_SELECTOR):
        # Nested noise is already gone once its ancestor is decomposed
        if noise.decomposed:
            continue
        noise.decompose()


def _region_text(elements: List) -> str:
    texts = []
    for element in elements:
        if element.decomposed:
            continue
        _strip_noise(element)
        text = element.get_text(separator=' ', strip=True)
        if text:
            texts.append(text)
    return ' '.join(texts).strip()


def extract_main_content(soup: BeautifulSoup) -> str:
    """Extract normalized main text from a parsed page."""
    if not soup:
        return ''

    content = ''
    for selector in CONTENT_SELECTORS:
        matches = soup.select(selector)
        if not matches:
            continue
        content = _region_text(matches)
        if len(content) > MIN_REGION_LENGTH:
            print(f"Found content using selector: {selector}")
            break

    if len(content) <= MIN_REGION_LENGTH:
        print("Falling back to body content")
        body = soup.find('body') or soup
        content = _region_text([body])

    return normalize_text(content)


def parse_content(html: str, title: Optional[str] = None) -> ExtractedContent:
    """
    Turn raw HTML into ExtractedContent.

    Raises:
        ExtractionError: when fewer than 50 characters of text survive
    """
    soup = BeautifulSoup(html or '', 'html.parser')
    page_title = soup.title.get_text(strip=True) if soup.title else None
    resolved_title = resolve_title(title, page_title)

    text = extract_main_content(soup)
    print(f"Content length: {len(text)} characters")

    if len(text) < MIN_CONTENT_LENGTH:
        raise ExtractionError('Not enough content extracted')

    return ExtractedContent(title=resolved_title, text=text)


def extract_content(url: str, title: Optional[str] = None,
                    fetch: Callable[[str], str] = fetch_webpage) -> ExtractedContent:
    """Fetch a bookmark URL and extract its main text."""
    html = fetch(url)
    return parse_content(html, title=title)
