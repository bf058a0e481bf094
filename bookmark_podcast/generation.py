"""
Gemini text generation: per-bookmark summary and two-host dialogue script.

Both share one request helper. The response is reduced to a tagged
GenerationResult right at the boundary; a missing candidate or empty text
becomes a GenerationError. No retries here, the orchestrator decides what
a failure means for the bookmark.
"""

from typing import Any, Optional

import google.generativeai as genai

from .config import DEFAULT_GEMINI_MODEL
from .errors import GenerationError
from .models import GenerationResult, Speaker
from .script_utils import HOST_NAMES

SUMMARY_PROMPT = """Create a clear and informative summary of the following content.
The summary should be well-structured and easy to read.
Include:
- A brief introduction to the topic
- Key points and main ideas
- Important facts and details
- A conclusion with main takeaways

Keep it under 200 words but make it comprehensive.
Use a professional but engaging tone.
Format it as a well-written article, not a conversation.
Avoid using conversational language or dialogue.

Content to summarize:
{content}"""

DIALOGUE_PROMPT = """Create a natural conversation between two podcast hosts discussing this topic.
The hosts should be named {host_a} and {host_b}.
Make it sound like a casual, engaging discussion.
Keep it brief (2-3 exchanges) but informative.
Format each line with the speaker's name followed by a colon.
Don't include any other text or formatting.

Topic: {title}
Content to discuss: {content}"""


def get_model(api_key: str, model_name: str = DEFAULT_GEMINI_MODEL):
    """Configure the Gemini SDK and return a model handle."""
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


def _field(obj: Any, name: str) -> Any:
    # SDK objects expose attributes, REST payloads are plain dicts
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_candidate_text(response: Any) -> GenerationResult:
    """Pull the first candidate's text out of a Gemini response."""
    candidates = _field(response, 'candidates')
    if not candidates:
        return GenerationResult.Err('Invalid response format from Gemini API: no candidates')

    content = _field(candidates[0], 'content')
    parts = _field(content, 'parts')
    if not parts:
        return GenerationResult.Err('Invalid response format from Gemini API: no content parts')

    text = _field(parts[0], 'text')
    if not isinstance(text, str) or not text.strip():
        return GenerationResult.Err('Invalid response format from Gemini API: empty text')

    return GenerationResult.Ok(text.strip())


def generate_text(model, prompt: str) -> str:
    """
    Single Gemini call.

    Raises:
        GenerationError: on SDK failure or malformed response
    """
    try:
        response = model.generate_content(prompt)
    except Exception as e:
        raise GenerationError(f'Gemini request failed: {e}') from e

    return extract_candidate_text(response).unwrap()


def generate_summary(content: str, model) -> str:
    """Prose summary (<200 words) of extracted page text."""
    print("Generating summary with Gemini...")
    summary = generate_text(model, SUMMARY_PROMPT.format(content=content))
    print("Summary generated successfully")
    return summary


def generate_dialogue_script(content: str, title: Optional[str], model) -> str:
    """Raw two-host script, one "Name: text" line per turn."""
    print("Generating conversational script...")
    prompt = DIALOGUE_PROMPT.format(
        host_a=HOST_NAMES[Speaker.A],
        host_b=HOST_NAMES[Speaker.B],
        title=title or 'Untitled',
        content=content,
    )
    return generate_text(model, prompt)
