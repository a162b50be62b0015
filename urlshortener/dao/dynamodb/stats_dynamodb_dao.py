"""DynamoDB implementation of StatsBaseDAO.

Table layout:
    Partition key: id (S)
    Attributes:    link_id (S), platform (S), created_at (S, ISO-8601)
    GSI:           <stats_link_index> with partition key link_id (S)

Records are queried per link through the global secondary index. Bulk
deletion uses BatchWriteItem (25 requests per batch, the DynamoDB maximum).
"""

import time

from beartype import beartype
from botocore.client import BaseClient

from urlshortener.constants import Defaults
from urlshortener.models import StatsModel
from urlshortener.dao.base import StatsBaseDAO
from urlshortener.dao.dynamodb.mixins import DynamoDBClientMixin
from urlshortener.dao.dynamodb.helpers import handle_dynamodb_error, serialize_item, deserialize_item
from urlshortener.dao.exceptions import DataStoreError, RequestTimeoutError
from urlshortener.utils.deadline import Deadline


BATCH_WRITE_LIMIT = 25
BATCH_WRITE_ATTEMPTS = 3
BATCH_WRITE_BACKOFF = 0.05  # seconds before the first re-send, doubled each time


class StatsDynamoDBDAO(DynamoDBClientMixin, StatsBaseDAO):
    """DynamoDB-based DAO for per-redirect stats records.

    Attributes (see DynamoDBClientMixin):
        client (botocore.client.BaseClient):
            DynamoDB client used to communicate with the table.
        table_name (str):
            Stats table name.
        index_name (str):
            Global secondary index keyed by link_id.
    """

    def __init__(
        self,
        table_name: str,
        index_name: str = Defaults.STATS_LINK_INDEX,
        dynamodb_client: BaseClient | None = None,
        timeout: float = Defaults.REQUEST_TIMEOUT,
        region_name: str | None = None,
    ):
        super().__init__(table_name=table_name, dynamodb_client=dynamodb_client, timeout=timeout, region_name=region_name)
        self.index_name = index_name

    @handle_dynamodb_error
    @beartype
    def insert(self, stats: StatsModel, **kwargs) -> 'StatsDynamoDBDAO':
        self.client.put_item(
            TableName=self.table_name,
            Item=serialize_item(stats.to_item()),
        )
        return self

    @handle_dynamodb_error
    @beartype
    def by_link(self, link_id: str, deadline: Deadline | None = None, **kwargs) -> list[StatsModel]:
        """Return every stats record of a link, following query pagination

        Args:
            link_id (str):
                Link id the records reference.
            deadline (Deadline | None):
                Stop paginating once it has passed.

        Returns:
            list[StatsModel]: records in index order, empty if there are none.

        Raises:
            DataStoreError:
                If a query page fails.
            RequestTimeoutError:
                If `deadline` passes with pages left to fetch.
        """
        records: list[StatsModel] = []
        query_kwargs = {
            'TableName': self.table_name,
            'IndexName': self.index_name,
            'KeyConditionExpression': 'link_id = :link_id',
            'ExpressionAttributeValues': serialize_item({':link_id': link_id}),
        }

        while True:
            page = self.client.query(**query_kwargs)
            records.extend(StatsModel.from_item(deserialize_item(item)) for item in page.get('Items', []))

            last_evaluated_key = page.get('LastEvaluatedKey')
            if not last_evaluated_key:
                break
            if deadline is not None and deadline.expired:
                raise RequestTimeoutError(f'Query of stats for link {link_id!r} ran out of time after {len(records)} records.')
            query_kwargs['ExclusiveStartKey'] = last_evaluated_key

        return records

    @handle_dynamodb_error
    @beartype
    def delete_by_link(self, link_id: str, deadline: Deadline | None = None, **kwargs) -> int:
        """Delete every stats record of a link

        Unprocessed items (usually throttling) are re-sent after a short
        exponential pause: BATCH_WRITE_BACKOFF, then twice that, and so on.

        Returns:
            int: number of deleted records.

        Raises:
            DataStoreError:
                If a query or batch fails, or DynamoDB keeps returning
                unprocessed items after BATCH_WRITE_ATTEMPTS tries.
            RequestTimeoutError:
                If `deadline` passes with records left to delete.
        """
        records = self.by_link(link_id, deadline=deadline)

        for start in range(0, len(records), BATCH_WRITE_LIMIT):
            if start and deadline is not None and deadline.expired:
                raise RequestTimeoutError(f'Deleting stats of link {link_id!r} ran out of time after {start} records.')
            batch = records[start : start + BATCH_WRITE_LIMIT]
            request_items = {
                self.table_name: [{'DeleteRequest': {'Key': serialize_item({'id': record.id})}} for record in batch],
            }
            self._batch_write(request_items)

        return len(records)

    def _batch_write(self, request_items: dict) -> None:
        for attempt in range(BATCH_WRITE_ATTEMPTS):
            if attempt:
                time.sleep(BATCH_WRITE_BACKOFF * 2 ** (attempt - 1))
            response = self.client.batch_write_item(RequestItems=request_items)
            request_items = response.get('UnprocessedItems') or {}
            if not request_items:
                return
        raise DataStoreError(f'DynamoDB left unprocessed stats deletions on table {self.table_name!r}.')
