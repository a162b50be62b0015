import functools
from typing import TypeVar, Any
from collections.abc import Callable

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from urlshortener.dao.exceptions import DataStoreError
from urlshortener.types import DynamoDBItem


__all__ = ['handle_dynamodb_error', 'serialize_item', 'deserialize_item', 'error_code']

F = TypeVar('F', bound=Callable[..., Any])

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def handle_dynamodb_error[F](method: F) -> F:
    """Wrap DynamoDB-interacting DAO methods to handle AWS errors

    Args:
        method (Callable[..., Any]):
            DAO method performing DynamoDB operations which may raise
            botocore ClientError (throttling, missing table, ...) or
            BotoCoreError (connection failures, timeouts).

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on any AWS failure.
            DAO exceptions raised by the method itself pass through untouched.

    Example:
        >>> @handle_dynamodb_error
        ... def get(self, link_id):
        ...     return self.client.get_item(TableName=self.table_name, Key=...)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except ClientError as e:
            raise DataStoreError(f'DynamoDB request on table {self.table_name!r} failed ({error_code(e)}).') from e
        except BotoCoreError as e:
            raise DataStoreError(f"Can't reach DynamoDB table {self.table_name!r}.") from e

    return wrapper


def error_code(error: ClientError) -> str:
    return error.response.get('Error', {}).get('Code', 'Unknown')


def serialize_item(item: DynamoDBItem) -> dict[str, Any]:
    """Convert a plain Python dict into DynamoDB's typed attribute-value format."""
    return {key: _serializer.serialize(value) for key, value in item.items()}


def deserialize_item(item: dict[str, Any]) -> DynamoDBItem:
    """Convert a DynamoDB typed attribute-value dict back into plain Python values."""
    return {key: _deserializer.deserialize(value) for key, value in item.items()}
