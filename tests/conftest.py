"""
Shared pytest fixtures for Bookmark Podcast Summarizer tests.
"""

import pytest
import sys
import importlib.util
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from bs4 import BeautifulSoup

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bookmark_podcast.errors import FetchError, GenerationError, SynthesisError
from bookmark_podcast.extraction import parse_content
from bookmark_podcast.pipeline import BookmarkPipeline


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load Cloud Function module with a unique name at module load time
_summarizer_module = _load_module_from_path(
    'bookmark_summarizer_main',
    PROJECT_ROOT / 'bookmark-summarizer' / 'main.py'
)


# ============================================================================
# Cloud Function Fixtures
# ============================================================================

@pytest.fixture
def summarizer_module():
    """Returns the loaded bookmark-summarizer main module (for patching)."""
    return _summarizer_module


@pytest.fixture
def send_summary():
    """Returns main entry point from bookmark-summarizer."""
    return _summarizer_module.send_summary


@pytest.fixture
def validate_payload():
    """Returns validate_payload function from bookmark-summarizer."""
    return _summarizer_module.validate_payload


@pytest.fixture
def is_origin_allowed():
    """Returns is_origin_allowed function from bookmark-summarizer."""
    return _summarizer_module.is_origin_allowed


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, json_data=None, method='POST', headers=None):
            self._json = json_data
            self.method = method
            self.headers = headers or {}
            self.data = b''

        def get_json(self, force=False, silent=False):
            return self._json

    return MockRequest


@pytest.fixture
def valid_environ():
    """Environment with every required variable set."""
    return {
        'GEMINI_API_KEY': 'test-gemini-key',
        'ELEVENLABS_API_KEY': 'test-elevenlabs-key',
        'BREVO_API_KEY': 'xkeysib-' + 'a' * 40,
        'EMAIL_FROM': 'podcast@example.com',
    }


# ============================================================================
# HTML Fixtures
# ============================================================================

ARTICLE_BODY = (
    "Python continues to be one of the most popular programming languages in the world. "
    "Its simple syntax makes it approachable for beginners, while its rich ecosystem of "
    "libraries keeps experienced developers productive in data science and web development."
)


@pytest.fixture
def article_html():
    """Raw HTML of a typical article page with navigation noise."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head><title>10 Python Tips | Example Blog</title></head>
    <body>
        <header>Site header with links</header>
        <nav>Home | About | Contact</nav>
        <article>
            <h1>10 Python Tips You Should Know</h1>
            <p>{ARTICLE_BODY}</p>
            <div class="share">Share on Twitter</div>
            <script>var tracking = true;</script>
        </article>
        <footer>Copyright 2024</footer>
    </body>
    </html>
    """


@pytest.fixture
def article_soup(article_html):
    """Returns BeautifulSoup of the sample article page."""
    return BeautifulSoup(article_html, 'html.parser')


@pytest.fixture
def short_html():
    """Page with too little text to summarize."""
    return "<html><head><title>Tiny</title></head><body><p>Just a few words.</p></body></html>"


# ============================================================================
# Collaborator Stubs
# ============================================================================

@pytest.fixture
def gemini_response():
    """Factory for Gemini-shaped responses (candidates[0].content.parts[0].text)."""
    def make(text):
        part = SimpleNamespace(text=text)
        content = SimpleNamespace(parts=[part])
        return SimpleNamespace(candidates=[SimpleNamespace(content=content)])
    return make


@pytest.fixture
def fixed_date():
    return datetime(2024, 12, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def scenario_pages(article_html):
    """URL -> HTML for the stubbed fetcher. Missing URLs fail to fetch."""
    return {
        'https://good.example/a': article_html,
    }


@pytest.fixture
def stub_extract(scenario_pages):
    """Deterministic extractor backed by scenario_pages."""
    def extract(url, title=None):
        if url not in scenario_pages:
            raise FetchError('HTTP error: 500', attempts=3)
        return parse_content(scenario_pages[url], title=title)
    return extract


@pytest.fixture
def stub_summarize():
    def summarize(text):
        return f"Summary of {len(text)} characters."
    return summarize


@pytest.fixture
def stub_script():
    def script(text, title):
        return f"Alex: Today we look at {title}.\nSarah: It covers {len(text)} characters of content."
    return script


@pytest.fixture
def synthesized_lines():
    """Records every line passed to stub_synthesize."""
    return []


@pytest.fixture
def stub_synthesize(synthesized_lines):
    def synthesize(line):
        synthesized_lines.append(line)
        return f"[{line.speaker.value}:{line.text}]".encode('utf-8')
    return synthesize


@pytest.fixture
def make_pipeline(stub_extract, stub_summarize, stub_script, stub_synthesize):
    """Factory for a BookmarkPipeline with deterministic collaborators; override any by keyword."""
    def make(**overrides):
        collaborators = {
            'extract': stub_extract,
            'summarize': stub_summarize,
            'script': stub_script,
            'synthesize': stub_synthesize,
        }
        collaborators.update(overrides)
        return BookmarkPipeline(**collaborators)
    return make


@pytest.fixture
def failing_generation():
    def fail(*args, **kwargs):
        raise GenerationError('Invalid response format from Gemini API: no candidates')
    return fail


@pytest.fixture
def failing_synthesize():
    def fail(line):
        raise SynthesisError('ElevenLabs error: quota exceeded')
    return fail
