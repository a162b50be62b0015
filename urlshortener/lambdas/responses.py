"""API Gateway (Lambda proxy) response builders shared by all handlers."""

import json
from typing import Any

from urlshortener.constants import TTL
from urlshortener.types import LambdaResponse


def response_json(status_code: int, payload: Any) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(payload, default=str),
    }


def response_text(status_code: int, message: str) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'text/plain'},
        'body': message,
    }


def response_201(payload: Any) -> LambdaResponse:
    return response_json(201, payload)


def response_200(payload: Any) -> LambdaResponse:
    return response_json(200, payload)


def response_204(message: str = '') -> LambdaResponse:
    return response_text(204, message)


def response_301(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 301,
        'headers': {
            'Location': location,
            'Cache-Control': f'public, max-age={TTL.REDIRECT_MAX_AGE}',
        },
        'body': '',
    }


def response_400(message: str) -> LambdaResponse:
    return response_text(400, message)


def response_404(message: str = 'Link not found') -> LambdaResponse:
    return response_text(404, message)


def response_500(message: str = 'Internal Server Error') -> LambdaResponse:
    return response_text(500, message)
