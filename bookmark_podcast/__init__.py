"""Bookmark-to-podcast pipeline shared by the summarizer Cloud Function."""

from .errors import (
    PipelineError,
    ConfigError,
    FetchError,
    ExtractionError,
    GenerationError,
    SynthesisError,
    NoAudioError,
    DeliveryError,
)

from .models import (
    Bookmark,
    ExtractedContent,
    Speaker,
    DialogueLine,
    GenerationResult,
    BookmarkState,
    BookmarkOutcome,
    PipelineResult,
)

from .config import Settings, load_settings, settings_status
from .summary_document import SummaryDocument
from .pipeline import BookmarkPipeline, build_pipeline
from .delivery import send_summary_email

__all__ = [
    # Errors
    'PipelineError',
    'ConfigError',
    'FetchError',
    'ExtractionError',
    'GenerationError',
    'SynthesisError',
    'NoAudioError',
    'DeliveryError',
    # Data model
    'Bookmark',
    'ExtractedContent',
    'Speaker',
    'DialogueLine',
    'GenerationResult',
    'BookmarkState',
    'BookmarkOutcome',
    'PipelineResult',
    'SummaryDocument',
    # Configuration
    'Settings',
    'load_settings',
    'settings_status',
    # Pipeline and delivery
    'BookmarkPipeline',
    'build_pipeline',
    'send_summary_email',
]
