"""Data Access Object (DAO) implementation for managing short links in DynamoDB

This module provides a DynamoDB-based implementation of LinkBaseDAO. The links
table is the authoritative store: everything else (cache entries, stats) is
derived from or hangs off it.

Responsibilities:
    - Conditionally insert links so that an id can never be overwritten;
    - Retrieve single links and the full (paginated) listing;
    - Delete links;
    - Translate AWS failures into DAO exceptions.

Table layout:
    Partition key: id (S)
    Attributes:    original_url (S), created_at (S, ISO-8601)

Classes:
    LinkDynamoDBDAO:
        DAO for storing and retrieving LinkModel in a DynamoDB table.

Example:
    >>> dao = LinkDynamoDBDAO(table_name='UrlShortenerTable')
    >>> dao.insert(LinkModel(id='aZ3kP9qL', original_url='https://example.com/page/123'))
    <LinkDynamoDBDAO>
    >>> dao.get('aZ3kP9qL').original_url
    'https://example.com/page/123'
"""

from beartype import beartype
from botocore.exceptions import ClientError

from urlshortener.constants import Limits
from urlshortener.models import LinkModel
from urlshortener.dao.base import LinkBaseDAO
from urlshortener.dao.dynamodb.mixins import DynamoDBClientMixin
from urlshortener.dao.dynamodb.helpers import handle_dynamodb_error, serialize_item, deserialize_item, error_code
from urlshortener.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError, RequestTimeoutError
from urlshortener.utils.deadline import Deadline


class LinkDynamoDBDAO(DynamoDBClientMixin, LinkBaseDAO):
    """DynamoDB-based Data Access Object (DAO) for managing short links

    Attributes (see DynamoDBClientMixin):
        client (botocore.client.BaseClient):
            DynamoDB client used to communicate with the table.
        table_name (str):
            Links table name.

    Methods:
        all(deadline=None, **kwargs) -> list[LinkModel]:
            Scan the whole table page by page.
        get(link_id: str, **kwargs) -> LinkModel:
            Retrieve a link. Raises LinkNotFoundError when absent or URL-less.
        insert(link: LinkModel, **kwargs) -> LinkDynamoDBDAO:
            Conditional put. Raises LinkAlreadyExistsError when the id is taken.
        delete(link_id: str, **kwargs) -> LinkDynamoDBDAO:
            Delete a link by id.

    All methods raise DataStoreError on AWS connectivity or request failures.
    """

    @handle_dynamodb_error
    def all(self, deadline: Deadline | None = None, **kwargs) -> list[LinkModel]:
        """Return every link in the table

        Scans in pages of `Limits.DYNAMODB_SCAN_PAGE` items, following
        `LastEvaluatedKey` until the table is exhausted or `deadline` passes.

        Returns:
            list[LinkModel]: all links (stats empty), in table scan order.

        Raises:
            DataStoreError:
                If any page request fails. Partially fetched pages are discarded.
            RequestTimeoutError:
                If `deadline` passes with pages left to fetch.
        """
        links: list[LinkModel] = []
        scan_kwargs = {'TableName': self.table_name, 'Limit': Limits.DYNAMODB_SCAN_PAGE}

        while True:
            page = self.client.scan(**scan_kwargs)
            links.extend(LinkModel.from_item(deserialize_item(item)) for item in page.get('Items', []))

            last_evaluated_key = page.get('LastEvaluatedKey')
            if not last_evaluated_key:
                break
            if deadline is not None and deadline.expired:
                raise RequestTimeoutError(f'Scan of table {self.table_name!r} ran out of time after {len(links)} links.')
            scan_kwargs['ExclusiveStartKey'] = last_evaluated_key

        return links

    @handle_dynamodb_error
    @beartype
    def get(self, link_id: str, **kwargs) -> LinkModel:
        """Retrieve a stored link by id

        Args:
            link_id (str):
                The short identifier of the link.

        Returns:
            LinkModel: The stored link.

        Raises:
            LinkNotFoundError:
                If there is no item, or the item carries an empty URL.
            DataStoreError:
                If the DynamoDB request fails.

        Example:
            >>> dao.get('aZ3kP9qL')
            LinkModel(id='aZ3kP9qL', original_url='https://example.com/page/123', ...)
        """
        response = self.client.get_item(
            TableName=self.table_name,
            Key=serialize_item({'id': link_id}),
        )

        item = response.get('Item')
        if not item:
            raise LinkNotFoundError(f"Link with id '{link_id}' not found.")

        link = LinkModel.from_item(deserialize_item(item))
        if not link.original_url:
            raise LinkNotFoundError(f"Link with id '{link_id}' has no URL.")
        return link

    @handle_dynamodb_error
    @beartype
    def insert(self, link: LinkModel, **kwargs) -> 'LinkDynamoDBDAO':
        """Insert a link unless its id already exists

        The existence check and the write are a single conditional PutItem
        (`attribute_not_exists(id)`), so two concurrent inserts of the same id
        can never both succeed.

        Args:
            link (LinkModel):
                Link to store. `stats` is not persisted.

        Returns:
            LinkDynamoDBDAO: self (for method chaining)

        Raises:
            LinkAlreadyExistsError:
                If a link with the same id already exists.
            DataStoreError:
                If the DynamoDB request fails for any other reason.
        """
        try:
            self.client.put_item(
                TableName=self.table_name,
                Item=serialize_item(link.to_item()),
                ConditionExpression='attribute_not_exists(id)',
            )
        except ClientError as e:
            if error_code(e) == 'ConditionalCheckFailedException':
                raise LinkAlreadyExistsError(f"Link with id '{link.id}' already exists.") from e
            raise
        return self

    @handle_dynamodb_error
    @beartype
    def delete(self, link_id: str, **kwargs) -> 'LinkDynamoDBDAO':
        """Delete a link by id (idempotent)

        Raises:
            DataStoreError:
                If the DynamoDB request fails.
        """
        self.client.delete_item(
            TableName=self.table_name,
            Key=serialize_item({'id': link_id}),
        )
        return self
