"""DynamoDB mixin providing shared client initialization.

Responsibilities:
    - Initialize a low-level DynamoDB client (thread-safe, unlike boto3 resources)
    - Bound every request by connect/read timeouts and a single attempt, so the
      request deadline is not multiplied by client retries
    - Point at LocalStack when running locally

Classes:
    - DynamoDBClientMixin: Base mixin to inject DynamoDB client setup and table naming.

Example:
    Typical usage with a DAO implementation:

        >>> class LinkDynamoDBDAO(DynamoDBClientMixin, LinkBaseDAO):
        ...     pass
        ...
        >>> dao = LinkDynamoDBDAO(table_name='UrlShortenerTable', timeout=4.0)
"""

import os

import boto3
from botocore.client import BaseClient
from botocore.config import Config

from urlshortener.constants import ENV, Defaults
from urlshortener.utils.runtime import running_locally


class DynamoDBClientMixin:
    """Mixin DynamoDB client setup for DynamoDB-backed DAOs.

    Attributes:
        client (botocore.client.BaseClient):
            Active DynamoDB client instance used by subclasses.

        table_name (str):
            Name of the DynamoDB table the DAO operates on.
    """

    def __init__(
        self,
        table_name: str,
        dynamodb_client: BaseClient | None = None,
        timeout: float = Defaults.REQUEST_TIMEOUT,
        region_name: str | None = None,
    ):
        """Initialize a DynamoDB-based DAO

        The option is given to either use an existing DynamoDB client instance or
        create one with connect/read timeouts equal to `timeout` and retries
        disabled (`total_max_attempts=1`). Callers decide what a failure means.

        Args:
            table_name (str):
                DynamoDB table name.

            dynamodb_client (BaseClient | None):
                Pre-initialized DynamoDB client. If None, a new client is created.

            timeout (float):
                Connect and read timeout in seconds for every request.

            region_name (str | None):
                AWS region, defaults to the Lambda runtime region.

        Raises:
            ValueError:
                If table_name is empty.
        """
        if not table_name:
            raise ValueError('DynamoDB table name must be a non-empty string.')

        if dynamodb_client is None:
            # fmt: off
            client_kwargs = {
                'endpoint_url': os.environ.get(ENV.LocalStack.ENDPOINT, 'http://localhost:4566'),
            } if running_locally() else {}
            # fmt: on
            config = Config(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={'total_max_attempts': 1, 'mode': 'standard'},
            )
            dynamodb_client = boto3.client('dynamodb', region_name=region_name, config=config, **client_kwargs)

        self.client = dynamodb_client
        self.table_name = table_name
