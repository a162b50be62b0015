"""Unit tests for the redirect_url AWS Lambda handler.

Test coverage includes:

1. Successful redirect (301, Location, Cache-Control) with stats scheduled
2. Empty link id (400)
3. Unknown link (404), store failure (500)
4. Stats disabled
"""

from dataclasses import replace

import pytest

from urlshortener.models import Platform
from urlshortener.dao.exceptions import DataStoreError, LinkNotFoundError
from urlshortener.lambdas.redirect_url import app


URL = 'https://example.com/blog/chuck-norris-is-awesome'


@pytest.fixture(autouse=True)
def _patch_lambda_dependencies(patch_services, link_service):
    link_service.resolve.return_value = URL
    patch_services(app)


@pytest.fixture
def event():
    return {
        'rawPath': '/aZ3kP9qL',
        'headers': {'user-agent': 'Mozilla/5.0 (iPhone) Instagram 300.0.0'},
        'requestContext': {'domainName': 'sho.rt', 'stage': '$default'},
    }


# -------------------------------
# 1. Successful redirect
# -------------------------------


def test_lambda_handler(event, context, link_service, stats_service):
    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 301
    assert response['headers']['Location'] == URL
    assert response['headers']['Cache-Control'] == 'public, max-age=300'
    link_service.resolve.assert_called_once_with('aZ3kP9qL')
    stats_service.schedule_record.assert_called_once_with('aZ3kP9qL', Platform.INSTAGRAM)


def test_lambda_handler_with_path_parameters(context, link_service):
    response = app.lambda_handler({'pathParameters': {'id': 'aZ3kP9qL'}}, context)

    assert response['statusCode'] == 301
    link_service.resolve.assert_called_once_with('aZ3kP9qL')


def test_unknown_platform(event, context, stats_service):
    event['headers'] = {'user-agent': 'curl/8.0'}

    app.lambda_handler(event, context)

    stats_service.schedule_record.assert_called_once_with('aZ3kP9qL', Platform.UNKNOWN)


# -------------------------------
# 2. Empty link id
# -------------------------------


@pytest.mark.parametrize('event', [{'rawPath': '/'}, {}])
def test_empty_link_id(event, context, link_service):
    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 400
    assert response['body'] == 'Short link key cannot be empty'
    link_service.resolve.assert_not_called()


# -------------------------------
# 3. Failures
# -------------------------------


def test_link_not_found(event, context, link_service, stats_service):
    link_service.resolve.side_effect = LinkNotFoundError("Link with id 'aZ3kP9qL' not found.")

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 404
    assert response['body'] == 'Link not found'
    stats_service.schedule_record.assert_not_called()


def test_store_failure(event, context, link_service, stats_service):
    link_service.resolve.side_effect = DataStoreError('table unavailable')

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 500
    stats_service.schedule_record.assert_not_called()


# -------------------------------
# 4. Stats disabled
# -------------------------------


def test_stats_disabled(event, context, patch_services, app_services):
    patch_services(app, replace(app_services, stats=None))

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 301
