"""
Bookmark Summarizer Cloud Function

Turns a batch of bookmarks from the browser extension into an emailed
summary with an attached two-host podcast.

Responsibilities:
- Validate the request (recipient email + non-empty bookmark list)
- Check configuration before any bookmark is processed
- Run the bookmark pipeline (extract, summarize, script, speak, assemble)
- Send the result through Brevo

Does NOT:
- Store bookmarks or summaries (one request, one email)
- Authenticate users (the extension supplies the recipient)
- Stream partial results
"""

import functions_framework
import json
import os
import sys
import traceback

# Add shared package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from bookmark_podcast.config import load_settings, parse_origins, settings_status
from bookmark_podcast.delivery import send_summary_email
from bookmark_podcast.errors import ConfigError, DeliveryError
from bookmark_podcast.pipeline import build_pipeline

# Configuration
ALLOWED_ORIGINS = parse_origins(os.environ.get('ALLOWED_ORIGINS'))
EXTENSION_ORIGIN_PREFIX = 'chrome-extension://'
ALLOWED_METHODS = 'GET, POST, OPTIONS'
ALLOWED_HEADERS = 'Content-Type, Authorization, X-User-ID'


def is_origin_allowed(origin: str, allowed_origins=None) -> bool:
    """Requests without Origin (curl, mobile), extension pages and listed origins pass."""
    if not origin:
        return True
    if origin.startswith(EXTENSION_ORIGIN_PREFIX):
        return True
    if allowed_origins is None:
        allowed_origins = ALLOWED_ORIGINS
    return origin.rstrip('/') in allowed_origins


def cors_headers(origin: str) -> dict:
    """Response headers echoing an allowed origin."""
    headers = {'Content-Type': 'application/json'}
    if origin:
        headers['Access-Control-Allow-Origin'] = origin
        headers['Access-Control-Allow-Credentials'] = 'true'
        headers['Vary'] = 'Origin'
    return headers


def validate_payload(payload) -> str:
    """Return an error message for a bad request body, or None."""
    if not payload or not isinstance(payload, dict):
        return 'Request body must be a JSON object'

    email = payload.get('email')
    if not email or not isinstance(email, str) or not email.strip():
        return 'Email is required'

    bookmarks = payload.get('bookmarks')
    if not bookmarks or not isinstance(bookmarks, list):
        return 'At least one bookmark is required'

    if not all(isinstance(b, dict) for b in bookmarks):
        return 'Each bookmark must be an object'

    return None


@functions_framework.http
def send_summary(request):
    """
    Main Cloud Function entry point.

    GET returns a health check. POST expects:
    {
        "email": "reader@example.com",
        "bookmarks": [
            {"url": "https://example.com/article", "title": "Article", "dateAdded": 1718000000000}
        ]
    }
    """
    origin = (getattr(request, 'headers', None) or {}).get('Origin')

    if not is_origin_allowed(origin):
        print(f"Rejected request from origin: {origin}")
        return (json.dumps({'success': False, 'error': 'Not allowed by CORS'}), 403,
                {'Content-Type': 'application/json'})

    headers = cors_headers(origin)

    # Handle CORS
    if request.method == 'OPTIONS':
        preflight = dict(headers)
        preflight.update({
            'Access-Control-Allow-Methods': ALLOWED_METHODS,
            'Access-Control-Allow-Headers': ALLOWED_HEADERS,
            'Access-Control-Max-Age': '3600'
        })
        return ('', 204, preflight)

    if request.method == 'GET':
        return (json.dumps({'status': 'Server is running!'}), 200, headers)

    if request.method != 'POST':
        return (json.dumps({'success': False, 'error': 'Method not allowed'}), 405, headers)

    try:
        payload = request.get_json(silent=True)

        payload_error = validate_payload(payload)
        if payload_error:
            return (json.dumps({'success': False, 'error': payload_error}), 400, headers)

        email = payload['email'].strip()
        bookmarks = payload['bookmarks']

        print("Environment variables status:")
        for name, status in settings_status().items():
            print(f"- {name}: {status}")

        try:
            settings = load_settings()
        except ConfigError as e:
            print(f"Configuration error: {e}")
            return (json.dumps({'success': False, 'error': str(e)}), 500, headers)

        print(f"Processing summary request: {len(bookmarks)} bookmarks for {email}")

        pipeline = build_pipeline(settings)
        result = pipeline.run(bookmarks)

        try:
            message_id = send_summary_email(settings, email, result)
        except DeliveryError as e:
            print(f"Brevo API Error: {e}")
            return (json.dumps({
                'success': False,
                'error': f'Failed to send email: {e}'
            }), 500, headers)

        return (json.dumps({
            'success': True,
            'message': 'Summary and podcast sent successfully' if result.audio
                       else 'Summary sent successfully (podcast audio unavailable)',
            'message_id': message_id,
            'bookmarks_processed': len(result.outcomes),
            'bookmarks_summarized': sum(1 for o in result.outcomes if o.succeeded),
            'audio_attached': result.has_audio,
        }), 200, headers)

    except Exception as e:
        print(f"Error processing summary request: {e}")
        print(traceback.format_exc())
        return (json.dumps({
            'success': False,
            'error': str(e) or 'An error occurred while processing your request'
        }), 500, headers)
