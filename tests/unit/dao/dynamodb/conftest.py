from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError


@pytest.fixture
def dynamodb_client():
    """Mock a low-level DynamoDB client."""
    client = MagicMock()
    client.get_item.return_value = {}
    client.scan.return_value = {'Items': []}
    client.query.return_value = {'Items': []}
    client.batch_write_item.return_value = {'UnprocessedItems': {}}
    return client


@pytest.fixture
def client_error():
    """Build a botocore ClientError for a given error code."""

    def _client_error(code: str, operation: str = 'PutItem') -> ClientError:
        return ClientError({'Error': {'Code': code, 'Message': code}}, operation)

    return _client_error
