"""
Speech synthesis for dialogue lines via ElevenLabs.

Each host has one fixed voice for the whole run. Line text is reflowed
before synthesis so sentence breaks become paragraph pauses and leftover
"Name:" tags are not read aloud.
"""

import re
from typing import Dict, Optional

from elevenlabs.client import ElevenLabs

from .config import DEFAULT_ELEVENLABS_MODEL, DEFAULT_VOICE_A, DEFAULT_VOICE_B
from .errors import SynthesisError
from .models import DialogueLine, Speaker

# Every clip must share this codec/bitrate so byte concatenation stays valid
OUTPUT_FORMAT = 'mp3_44100_128'

DEFAULT_VOICES = {
    Speaker.A: DEFAULT_VOICE_A,
    Speaker.B: DEFAULT_VOICE_B,
}


def get_client(api_key: str) -> ElevenLabs:
    return ElevenLabs(api_key=api_key.strip())


def voice_for(speaker: Speaker, voices: Optional[Dict[Speaker, str]] = None) -> str:
    """Voice ID for a host."""
    return (voices or DEFAULT_VOICES)[speaker]


def format_for_speech(text: str) -> str:
    """
    Reflow a line for more natural prosody.

    - "Sarah:" style tags become "Sarah," so the tag isn't spoken as a label
    - Whitespace is collapsed
    - A paragraph break follows each sentence-ending .!? before a capital
    """
    if not text:
        return ''
    text = re.sub(r'([A-Z][a-z]+):', r'\1,', text)
    text = re.sub(r'\s+', ' ', text)
    text = re.sub(r'([.!?])\s*([A-Z])', r'\1\n\n\2', text)
    return text.strip()


def _collect_audio(response) -> bytes:
    # convert() streams chunks; older SDKs return bytes directly
    if isinstance(response, (bytes, bytearray)):
        return bytes(response)
    audio = bytearray()
    for chunk in response:
        if chunk:
            audio.extend(chunk)
    return bytes(audio)


def synthesize_line(line: DialogueLine, client: ElevenLabs,
                    voices: Optional[Dict[Speaker, str]] = None,
                    model_id: str = DEFAULT_ELEVENLABS_MODEL) -> bytes:
    """
    Synthesize one dialogue line.

    Raises:
        SynthesisError: on API failure or empty audio
    """
    text = format_for_speech(line.text)
    if not text:
        raise SynthesisError('Nothing to synthesize')

    voice_id = voice_for(line.speaker, voices)
    print(f"Using voice ID: {voice_id} for speaker {line.speaker.value}")

    try:
        response = client.text_to_speech.convert(
            text=text,
            voice_id=voice_id,
            model_id=model_id,
            output_format=OUTPUT_FORMAT,
        )
        audio = _collect_audio(response)
    except Exception as e:
        raise SynthesisError(f'ElevenLabs error: {e}') from e

    if not audio:
        raise SynthesisError('ElevenLabs returned no audio')

    return audio
