"""
Batch pipeline: bookmarks -> summary document + podcast audio.

Bookmarks are processed one at a time:
    Pending -> Fetched -> Summarized -> Scripted
with two failure exits (FetchFailed, GenerationFailed) that only end that
bookmark. Once every bookmark has been visited, the collected scripts are
joined, parsed into dialogue lines, synthesized line by line and
concatenated into one track.

A single bad bookmark, line or audio stage never fails the run.
"""

from functools import partial
from typing import Any, Callable, Iterable, List, Optional

from .audio import concatenate_audio
from .config import Settings
from .errors import (
    ExtractionError,
    FetchError,
    GenerationError,
    NoAudioError,
    SynthesisError,
)
from .extraction import extract_content
from .generation import generate_dialogue_script, generate_summary, get_model
from .models import (
    Bookmark,
    BookmarkOutcome,
    BookmarkState,
    DialogueLine,
    ExtractedContent,
    PipelineResult,
    Speaker,
)
from .script_utils import split_dialogue, validate_dialogue_script
from .speech import get_client, synthesize_line
from .summary_document import SummaryDocument

# Gemini input bound per bookmark
CONTENT_CHAR_LIMIT = 2000


class BookmarkPipeline:
    """
    Orchestrates extraction, generation and speech across a bookmark batch.

    Collaborators are injected as callables so tests can stub them:
        extract(url, title=None) -> ExtractedContent
        summarize(text) -> str
        script(text, title) -> str
        synthesize(DialogueLine) -> bytes
        assemble(list of bytes) -> bytes
    """

    def __init__(
        self,
        *,
        extract: Callable[..., ExtractedContent],
        summarize: Callable[[str], str],
        script: Callable[[str, str], str],
        synthesize: Callable[[DialogueLine], bytes],
        assemble: Callable[[List[bytes]], bytes] = concatenate_audio,
        content_limit: int = CONTENT_CHAR_LIMIT,
    ):
        self._extract = extract
        self._summarize = summarize
        self._script = script
        self._synthesize = synthesize
        self._assemble = assemble
        self._content_limit = content_limit

    def run(self, bookmarks: Iterable[Any]) -> PipelineResult:
        """Process every bookmark, then build the podcast. Never raises per item."""
        document = SummaryDocument()
        outcomes = []
        scripts = []

        for raw in bookmarks:
            bookmark = raw if isinstance(raw, Bookmark) else Bookmark.from_dict(raw)
            if not bookmark.has_valid_url:
                print(f"Skipping bookmark without a valid http(s) URL: {bookmark.url!r}")
                continue

            outcome, script = self._process_bookmark(bookmark, document)
            outcomes.append(outcome)
            if script is not None:
                scripts.append(script)

        batch_script = '\n\n'.join(scripts)
        audio = self._build_audio(batch_script) if scripts else None

        succeeded = sum(1 for outcome in outcomes if outcome.succeeded)
        print(f"Processed {len(outcomes)} bookmarks ({succeeded} summarized), "
              f"audio: {'yes' if audio else 'no'}")

        return PipelineResult(summary=document, audio=audio, outcomes=outcomes,
                              script=batch_script)

    def _process_bookmark(self, bookmark: Bookmark, document: SummaryDocument):
        """Run one bookmark through its states. Returns (outcome, script or None)."""
        outcome = BookmarkOutcome(bookmark=bookmark, title=bookmark.title or 'Untitled')
        print(f"Processing bookmark: {bookmark.url}")

        try:
            content = self._extract(bookmark.url, title=bookmark.title)
        except (FetchError, ExtractionError) as e:
            print(f"Error processing bookmark {bookmark.url}: {e}")
            outcome.state = BookmarkState.FETCH_FAILED
            outcome.error = str(e)
            document.add_fetch_error(bookmark, outcome.title, str(e))
            return outcome, None

        outcome.state = BookmarkState.FETCHED
        outcome.title = content.title
        excerpt = content.text[:self._content_limit]

        try:
            summary = self._summarize(excerpt)
            outcome.state = BookmarkState.SUMMARIZED
            script = self._script(excerpt, content.title)
            outcome.state = BookmarkState.SCRIPTED
        except GenerationError as e:
            print(f"Error generating content for {content.title}: {e}")
            outcome.state = BookmarkState.GENERATION_FAILED
            outcome.error = str(e)
            document.add_generation_error(bookmark, content.title, str(e))
            return outcome, None

        validation = validate_dialogue_script(script)
        if not validation['valid']:
            print(f"Script warnings for {content.title}: {'; '.join(validation['errors'])}")

        document.add_summary(bookmark, content.title, summary)
        print(f"Generated summary and conversation script for: {content.title}")
        return outcome, script

    def _build_audio(self, batch_script: str) -> Optional[bytes]:
        """Synthesize each line and join. Returns None when no audio survives."""
        lines, dropped = split_dialogue(batch_script)
        for line in dropped:
            print(f"Dropping unparsable script line: {line[:80]!r}")
        print(f"Number of conversation lines: {len(lines)}")

        clips = []
        for line in lines:
            try:
                clips.append(self._synthesize(line))
            except SynthesisError as e:
                print(f"Error generating speech for line: {e}")
                continue

        try:
            return self._assemble(clips)
        except NoAudioError as e:
            print(f"Error generating podcast audio: {e}")
            return None


def build_pipeline(settings: Settings) -> BookmarkPipeline:
    """Wire the pipeline to Gemini and ElevenLabs using process configuration."""
    model = get_model(settings.gemini_api_key, settings.gemini_model)
    client = get_client(settings.elevenlabs_api_key)
    voices = {
        Speaker.A: settings.voice_a,
        Speaker.B: settings.voice_b,
    }

    return BookmarkPipeline(
        extract=extract_content,
        summarize=partial(generate_summary, model=model),
        script=partial(generate_dialogue_script, model=model),
        synthesize=partial(synthesize_line, client=client, voices=voices,
                           model_id=settings.elevenlabs_model_id),
    )
