"""API Gateway (Lambda proxy) response builders shared by all handlers"""

import json
from typing import Any

from clicklinks.exceptions import ShortLinkError


JSON_HEADERS = {
    'Content-Type': 'application/json',
    # TODO: restrict to the frontend's origin once it has a stable domain
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def response_json(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> dict:
    return {
        'statusCode': status_code,
        'headers': {**JSON_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(error: ShortLinkError) -> dict:
    """Respond with the status code and error code carried by a ShortLinkError"""
    return response_json(error.status_code, {'error': error.error_code, 'message': str(error)})


def response_400(message: str, error_code: str) -> dict:
    return response_json(400, {'error': error_code, 'message': message})


def response_500(message: str | None = None) -> dict:
    base = 'Internal Server Error'
    return response_json(500, {'message': base if not message else f'{base} ({message})'})


def response_302(*, location: str) -> dict:
    return {
        'statusCode': 302,
        'headers': {**JSON_HEADERS, 'Location': location},
        'body': json.dumps({}),  # no body needed for redirects
    }
