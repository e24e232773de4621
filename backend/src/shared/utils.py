"""
Common utility functions for Lambda handlers.
"""
import json
import secrets
import string
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from .errors import ComplaintError

BASE36_ALPHABET = string.digits + string.ascii_uppercase


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal types from DynamoDB."""

    def default(self, o):
        if isinstance(o, Decimal):
            # Convert to int if it's a whole number, otherwise float
            if o % 1 == 0:
                return int(o)
            return float(o)
        return super().default(o)


def format_response(
    status_code: int,
    body: Any,
    headers: Dict[str, str] = None
) -> Dict[str, Any]:
    """
    Format a standard API Gateway response with CORS headers.

    Args:
        status_code: HTTP status code
        body: Response body (will be JSON serialized)
        headers: Additional headers to include

    Returns:
        API Gateway response dict
    """
    default_headers = {
        'Access-Control-Allow-Origin': '*',
        'Access-Control-Allow-Credentials': True,
        'Content-Type': 'application/json'
    }

    if headers:
        default_headers.update(headers)

    return {
        'statusCode': status_code,
        'headers': default_headers,
        'body': json.dumps(body, cls=DecimalEncoder)
    }


def error_response(error: ComplaintError) -> Dict[str, Any]:
    """Map a complaint error to its HTTP response."""
    return format_response(error.status_code, {
        'error': error.message,
        'code': type(error).__name__
    })


def parse_body(event: dict) -> dict:
    """
    Safely parse JSON body from API Gateway event.

    Args:
        event: API Gateway Lambda proxy event

    Returns:
        Parsed body dict or empty dict if invalid
    """
    try:
        body = event.get('body') or '{}'
        if isinstance(body, str):
            body = json.loads(body)
        return body if isinstance(body, dict) else {}
    except (json.JSONDecodeError, TypeError):
        return {}


def get_path_param(event: dict, param_name: str) -> Optional[str]:
    """Extract path parameter from event."""
    try:
        return event['pathParameters'][param_name]
    except (KeyError, TypeError):
        return None


def get_query_param(event: dict, param_name: str, default: str = None) -> Optional[str]:
    """Extract query string parameter from event."""
    params = event.get('queryStringParameters') or {}
    return params.get(param_name, default)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_base36(number: int) -> str:
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return ''.join(reversed(digits))


def generate_complaint_id(now_ms: Optional[int] = None) -> str:
    """
    Generate a human-readable complaint id: HC-<base36 millis>-<4 random chars>.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = ''.join(secrets.choice(BASE36_ALPHABET) for _ in range(4))
    return f"HC-{to_base36(now_ms)}-{suffix}"
