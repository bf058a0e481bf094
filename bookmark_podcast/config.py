"""
Environment configuration for the bookmark summarizer.

Credentials are read from environment variables (set on the Cloud Function)
and are read-only for the life of the process.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import ConfigError

DEFAULT_GEMINI_MODEL = 'gemini-2.0-flash'
DEFAULT_ELEVENLABS_MODEL = 'eleven_multilingual_v2'
DEFAULT_VOICE_A = 'EXAVITQu4vr4xnSDxMaL'  # host Alex
DEFAULT_VOICE_B = '21m00Tcm4TlvDq8ikWAM'  # host Sarah
DEFAULT_SENDER_NAME = 'Bookmark Podcast Summarizer'

# Brevo API keys are longer than this
MIN_BREVO_KEY_LENGTH = 30

REQUIRED_VARIABLES = [
    'GEMINI_API_KEY',
    'ELEVENLABS_API_KEY',
    'BREVO_API_KEY',
    'EMAIL_FROM',
]


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str
    elevenlabs_api_key: str
    brevo_api_key: str
    email_from: str
    sender_name: str = DEFAULT_SENDER_NAME
    gemini_model: str = DEFAULT_GEMINI_MODEL
    elevenlabs_model_id: str = DEFAULT_ELEVENLABS_MODEL
    voice_a: str = DEFAULT_VOICE_A
    voice_b: str = DEFAULT_VOICE_B


def parse_origins(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated ALLOWED_ORIGINS value."""
    if not value:
        return ()
    return tuple(origin.strip().rstrip('/') for origin in value.split(',') if origin.strip())


def validate_environment(environ: Mapping[str, str]) -> List[str]:
    """Return a list of configuration problems (empty when valid)."""
    errors = []

    for name in REQUIRED_VARIABLES:
        if not (environ.get(name) or '').strip():
            errors.append(f"{name} is not configured")

    brevo_key = (environ.get('BREVO_API_KEY') or '').strip()
    if brevo_key and len(brevo_key) <= MIN_BREVO_KEY_LENGTH:
        errors.append(
            f"BREVO_API_KEY looks invalid: expected more than {MIN_BREVO_KEY_LENGTH} characters"
        )

    return errors


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Raises:
        ConfigError: listing every missing or malformed variable
    """
    if environ is None:
        environ = os.environ

    errors = validate_environment(environ)
    if errors:
        raise ConfigError('; '.join(errors))

    return Settings(
        gemini_api_key=environ['GEMINI_API_KEY'].strip(),
        elevenlabs_api_key=environ['ELEVENLABS_API_KEY'].strip(),
        brevo_api_key=environ['BREVO_API_KEY'].strip(),
        email_from=environ['EMAIL_FROM'].strip(),
        sender_name=environ.get('EMAIL_SENDER_NAME') or DEFAULT_SENDER_NAME,
        gemini_model=environ.get('GEMINI_MODEL') or DEFAULT_GEMINI_MODEL,
        elevenlabs_model_id=environ.get('ELEVENLABS_MODEL_ID') or DEFAULT_ELEVENLABS_MODEL,
        voice_a=environ.get('ELEVENLABS_VOICE_A') or DEFAULT_VOICE_A,
        voice_b=environ.get('ELEVENLABS_VOICE_B') or DEFAULT_VOICE_B,
    )


def settings_status(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Per-variable status for logs. Never includes secret values."""
    if environ is None:
        environ = os.environ
    return {
        name: '✓ Set' if (environ.get(name) or '').strip() else '✗ Not set'
        for name in REQUIRED_VARIABLES
    }
