"""API Gateway (Lambda Proxy) response builders shared by the lambda handlers"""

import json


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def _error_body(base: str, message: str | None, error_code: str | None) -> str:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return json.dumps(body)


def response_200(body: dict) -> dict:
    return {
        'statusCode': 200,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps(body),
    }


def response_302(*, location: str) -> dict:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None) -> dict:
    return {
        'statusCode': 400,
        'body': _error_body('Bad Request', message, error_code),
    }


def response_404(message: str | None = None, error_code: str | None = None) -> dict:
    return {
        'statusCode': 404,
        'body': _error_body('Not Found', message, error_code),
    }


def response_500(message: str | None = None, error_code: str | None = None, retry_after: int | None = None) -> dict:
    response = {
        'statusCode': 500,
        'body': _error_body('Internal Server Error', message, error_code),
    }
    if retry_after is not None:
        response['headers'] = {'Retry-After': str(retry_after)}
    return response
