"""
Email delivery through the Brevo transactional email API.

Sends the summary document as HTML + plain text, with the podcast attached
(base64) when audio was produced. Failures raise DeliveryError, which is
the one pipeline-adjacent error that fails the request.
"""

import base64
from typing import Any, Dict, Optional

import requests

from .audio import ATTACHMENT_NAME
from .config import Settings
from .errors import DeliveryError
from .models import PipelineResult

BREVO_SEND_URL = 'https://api.brevo.com/v3/smtp/email'
EMAIL_SUBJECT = 'Your Weekly Bookmark Summary & Podcast'
DELIVERY_TIMEOUT = 30  # seconds


def build_email_payload(settings: Settings, recipient: str, result: PipelineResult,
                        subject: str = EMAIL_SUBJECT) -> Dict[str, Any]:
    """Brevo sendTransacEmail body for one pipeline result."""
    payload = {
        'sender': {
            'name': settings.sender_name,
            'email': settings.email_from
        },
        'to': [{'email': recipient}],
        'subject': subject,
        'htmlContent': result.summary.to_html(),
        'textContent': result.summary.to_text(),
    }

    if result.audio:
        payload['attachment'] = [{
            'name': ATTACHMENT_NAME,
            'content': base64.b64encode(result.audio).decode('ascii')
        }]

    return payload


def send_summary_email(settings: Settings, recipient: str, result: PipelineResult) -> Optional[str]:
    """
    Send the summary email. Returns Brevo's messageId when present.

    Raises:
        DeliveryError: on network failure or non-2xx response
    """
    payload = build_email_payload(settings, recipient, result)
    print(f"Sending summary email to {recipient} "
          f"({'with' if 'attachment' in payload else 'without'} podcast attachment)")

    try:
        response = requests.post(
            BREVO_SEND_URL,
            json=payload,
            headers={
                'api-key': settings.brevo_api_key,
                'Content-Type': 'application/json',
                'Accept': 'application/json'
            },
            timeout=DELIVERY_TIMEOUT
        )
    except requests.exceptions.Timeout as e:
        raise DeliveryError('Email delivery timed out') from e
    except requests.exceptions.RequestException as e:
        raise DeliveryError(f'Email delivery failed: {e}') from e

    if not response.ok:
        raise DeliveryError(
            f'Brevo API error: {response.status_code} - {response.text[:200]}',
            status_code=response.status_code
        )

    try:
        data = response.json()
    except ValueError:
        data = {}
    message_id = data.get('messageId') if isinstance(data, dict) else None

    print(f"Email sent successfully: {message_id}")
    return message_id
