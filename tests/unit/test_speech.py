"""
Unit tests for speech formatting and synthesis.

The ElevenLabs client is replaced with MagicMock.
"""

import pytest
from unittest.mock import MagicMock

from bookmark_podcast.errors import SynthesisError
from bookmark_podcast.models import DialogueLine, Speaker
from bookmark_podcast.speech import (
    DEFAULT_VOICES,
    OUTPUT_FORMAT,
    format_for_speech,
    synthesize_line,
    voice_for,
)


class TestFormatForSpeech:
    """Tests for format_for_speech()"""

    def test_paragraph_break_after_sentence(self):
        assert format_for_speech("First point. Second point.") == "First point.\n\nSecond point."

    def test_question_and_exclamation(self):
        assert format_for_speech("Really? Yes! Great.") == "Really?\n\nYes!\n\nGreat."

    def test_name_tag_becomes_comma(self):
        assert format_for_speech("Good question. Sarah: what do you think?") == \
            "Good question.\n\nSarah, what do you think?"

    def test_whitespace_collapsed(self):
        assert format_for_speech("  lots   of\n\n space  ") == "lots of space"

    def test_lowercase_after_period_not_split(self):
        assert format_for_speech("Version 2.5 is out. e.g. this") == "Version 2.5 is out. e.g. this"

    def test_empty(self):
        assert format_for_speech("") == ""


class TestVoiceFor:
    """Tests for voice_for()"""

    def test_each_host_has_distinct_voice(self):
        assert voice_for(Speaker.A) != voice_for(Speaker.B)

    def test_stable_across_calls(self):
        assert voice_for(Speaker.A) == voice_for(Speaker.A) == DEFAULT_VOICES[Speaker.A]

    def test_custom_voices(self):
        voices = {Speaker.A: 'voice-a', Speaker.B: 'voice-b'}
        assert voice_for(Speaker.B, voices) == 'voice-b'


class TestSynthesizeLine:
    """Tests for synthesize_line()"""

    def test_streams_chunks_into_bytes(self):
        client = MagicMock()
        client.text_to_speech.convert.return_value = iter([b'ID3', b'', b'audio'])

        audio = synthesize_line(DialogueLine(Speaker.A, "Hello there."), client, model_id='m1')

        assert audio == b'ID3audio'
        client.text_to_speech.convert.assert_called_once_with(
            text="Hello there.",
            voice_id=DEFAULT_VOICES[Speaker.A],
            model_id='m1',
            output_format=OUTPUT_FORMAT,
        )

    def test_uses_speaker_voice(self):
        client = MagicMock()
        client.text_to_speech.convert.return_value = [b'x']
        voices = {Speaker.A: 'voice-a', Speaker.B: 'voice-b'}

        synthesize_line(DialogueLine(Speaker.B, "Hi."), client, voices=voices)

        assert client.text_to_speech.convert.call_args.kwargs['voice_id'] == 'voice-b'

    def test_formats_text_before_sending(self):
        client = MagicMock()
        client.text_to_speech.convert.return_value = [b'x']

        synthesize_line(DialogueLine(Speaker.A, "One. Two."), client)

        assert client.text_to_speech.convert.call_args.kwargs['text'] == "One.\n\nTwo."

    def test_api_error_becomes_synthesis_error(self):
        client = MagicMock()
        client.text_to_speech.convert.side_effect = RuntimeError("401 unauthorized")

        with pytest.raises(SynthesisError, match="401 unauthorized"):
            synthesize_line(DialogueLine(Speaker.A, "Hello."), client)

    def test_empty_audio_is_synthesis_error(self):
        client = MagicMock()
        client.text_to_speech.convert.return_value = iter([])

        with pytest.raises(SynthesisError, match="no audio"):
            synthesize_line(DialogueLine(Speaker.A, "Hello."), client)

    def test_blank_text_not_sent(self):
        client = MagicMock()

        with pytest.raises(SynthesisError):
            synthesize_line(DialogueLine(Speaker.A, "   "), client)
        client.text_to_speech.convert.assert_not_called()
