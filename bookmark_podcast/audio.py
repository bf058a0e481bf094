"""Audio assembly: join per-line MP3 clips into one podcast track."""

from typing import Iterable

from .errors import NoAudioError

ATTACHMENT_NAME = 'weekly-bookmark-podcast.mp3'


def concatenate_audio(clips: Iterable[bytes]) -> bytes:
    """
    Byte-level concatenation in line order. No re-encoding.

    Raises:
        NoAudioError: if there is nothing to join
    """
    clips = [clip for clip in clips if clip]
    if not clips:
        raise NoAudioError('No audio was generated for any part of the conversation')

    print(f"Combining {len(clips)} audio clips...")
    return b''.join(clips)
