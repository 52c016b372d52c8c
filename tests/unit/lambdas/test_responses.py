import json

import pytest

from shortlink.exceptions import (
    InvalidUrlError,
    InvalidCodeError,
    LinkNotFoundError,
    GenerationExhaustedError,
    StoreUnavailableError,
)
from shortlink.lambdas.responses import CORS_HEADERS, response_200, response_302, response_error


def test_response_200():
    response = response_200({'code': 'abc1234'})

    assert response['statusCode'] == 200
    assert response['headers'] == {'Content-Type': 'application/json', **CORS_HEADERS}
    assert json.loads(response['body']) == {'code': 'abc1234'}


def test_response_302():
    response = response_302(location='https://example.com')

    assert response['statusCode'] == 302
    assert response['headers']['Location'] == 'https://example.com'
    assert json.loads(response['body']) == {}


@pytest.mark.parametrize(
    'error, status_code, error_code',
    [
        (InvalidUrlError('bad url'), 400, 'InvalidUrl'),
        (InvalidCodeError('bad code'), 400, 'InvalidCode'),
        (LinkNotFoundError('missing'), 404, 'NotFound'),
        (GenerationExhaustedError('exhausted'), 500, 'GenerationExhausted'),
        (StoreUnavailableError('get'), 503, 'StoreUnavailable'),
    ],
)
def test_response_error(error, status_code, error_code):
    response = response_error(error)
    body = json.loads(response['body'])

    assert response['statusCode'] == status_code
    assert body['error'] == error_code
    assert body['message'] == str(error)


def test_response_error_without_message():
    body = json.loads(response_error(LinkNotFoundError())['body'])
    assert body['message'] == 'NotFound'


def test_store_unavailable_default_message():
    assert str(StoreUnavailableError('insert_if_absent')) == "Data store unavailable during 'insert_if_absent'."
