"""
Dialogue script utilities for the bookmark podcast.

Gemini returns the two-host script as free text. This module is the single
parse step that turns it into DialogueLine values; nothing downstream looks
at raw script text.

Expected format, one line per turn:
    Alex: Welcome back to the show...
    Sarah: Today we're looking at...

Also tolerated:
    **Alex:** text          (markdown bold around the speaker tag)
    A: text / B: text       (bare speaker letters)

Lines that don't match "<Speaker>: <text>" are dropped, never fatal.
"""

import re
from typing import Dict, List, Tuple

from .models import DialogueLine, Speaker

# Host names used in the scripting prompt
HOST_NAMES = {
    Speaker.A: 'Alex',
    Speaker.B: 'Sarah',
}

_SPEAKER_LINE = re.compile(r"^([A-Za-z][\w .'-]{0,40}?)\s*:\s*(.+)$")


def speaker_for_label(label: str) -> Speaker:
    """
    Map a speaker label to a host.

    Host A is matched by name or letter; every other label is voiced by host B.
    """
    normalized = label.strip().lower()
    if normalized in (HOST_NAMES[Speaker.A].lower(), Speaker.A.value.lower()):
        return Speaker.A
    return Speaker.B


def parse_dialogue_line(line: str):
    """Parse one script line. Returns DialogueLine or None if it doesn't match."""
    if not line:
        return None

    cleaned = line.replace('**', '').replace('__', '').strip()
    cleaned = re.sub(r'^[-*>\s]+', '', cleaned)

    match = _SPEAKER_LINE.match(cleaned)
    if not match:
        return None

    text = match.group(2).strip()
    if not text:
        return None

    return DialogueLine(speaker=speaker_for_label(match.group(1)), text=text)


def split_dialogue(script: str) -> Tuple[List[DialogueLine], List[str]]:
    """
    Split a raw script into dialogue lines.

    Returns:
        Tuple of (dialogue_lines, dropped_lines). Blank lines are in neither.
    """
    lines = []
    dropped = []

    if not script:
        return lines, dropped

    for raw_line in script.split('\n'):
        if not raw_line.strip():
            continue
        parsed = parse_dialogue_line(raw_line)
        if parsed is None:
            dropped.append(raw_line.strip())
        else:
            lines.append(parsed)

    return lines, dropped


def parse_dialogue(script: str) -> List[DialogueLine]:
    """Parse a raw script, silently dropping malformed lines."""
    return split_dialogue(script)[0]


def validate_dialogue_script(script: str) -> Dict:
    """
    Validate a generated script.

    Returns dict with:
        valid: bool - True if at least one line parsed and both hosts speak
        lines: list - Parsed DialogueLine values
        dropped: list - Non-blank lines that didn't parse
        errors: list - Error messages
    """
    lines, dropped = split_dialogue(script)
    result = {
        'valid': True,
        'lines': lines,
        'dropped': dropped,
        'errors': []
    }

    if not lines:
        result['valid'] = False
        result['errors'].append('Script contains no dialogue lines')
        return result

    speakers = {line.speaker for line in lines}
    for speaker, name in HOST_NAMES.items():
        if speaker not in speakers:
            result['valid'] = False
            result['errors'].append(f"Host {name} has no lines")

    return result
