"""API Gateway (Lambda proxy) response builders shared by all handlers

Every error body carries a machine-readable `error` and a human-readable
`message`, so clients can render `errorData.message || errorData.error`.
"""

import json
from typing import Any

from shortlink.exceptions import ShortlinkError


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type,Idempotency-Key',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def response_json(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> dict:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def response_200(body: dict[str, Any]) -> dict:
    return response_json(200, body)


def response_302(*, location: str) -> dict:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_error(error: ShortlinkError) -> dict:
    return response_json(
        error.status_code,
        {
            'error': error.error_code,
            'message': str(error) or error.error_code,
        },
    )
