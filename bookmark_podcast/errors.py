"""
Error taxonomy for the bookmark podcast pipeline.

Per-bookmark errors (FetchError, ExtractionError, GenerationError) are caught
at the bookmark boundary and rendered into the summary document.
SynthesisError is caught per dialogue line, NoAudioError degrades the result
to "no attachment". Only DeliveryError and ConfigError reach the caller.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(PipelineError):
    """Required configuration is missing or malformed."""


class FetchError(PipelineError):
    """Network failure, timeout or non-2xx response while fetching a page."""

    def __init__(self, message: str, attempts: int = 1):
        super().__init__(message)
        self.attempts = attempts


class ExtractionError(PipelineError):
    """Fetched page did not yield enough readable text."""


class GenerationError(PipelineError):
    """Gemini call failed or returned no usable candidate."""


class SynthesisError(PipelineError):
    """Text-to-speech call failed for a single dialogue line."""


class NoAudioError(PipelineError):
    """No dialogue line survived synthesis."""


class DeliveryError(PipelineError):
    """Transactional email could not be sent."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
