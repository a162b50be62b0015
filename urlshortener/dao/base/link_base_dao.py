"""Abstract base class for Link data access objects (DAOs).

This class establishes a consistent contract for the authoritative link store,
regardless of the underlying storage mechanism (e.g., DynamoDB, PostgreSQL).

Responsibilities:
    - Provide an interface for listing, inserting, retrieving and deleting LinkModel objects.
    - Enforce id uniqueness through a conditional insert (never a read-then-write).
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlshortener.models import LinkModel
        >>> from urlshortener.dao.dynamodb import LinkDynamoDBDAO

        >>> dao = LinkDynamoDBDAO(table_name='UrlShortenerTable')

        >>> link = LinkModel(id='aZ3kP9qL', original_url='https://example.com/blog/article-123')
        >>> dao.insert(link)

        >>> dao.get('aZ3kP9qL').original_url
        'https://example.com/blog/article-123'

        >>> dao.delete('aZ3kP9qL')
"""

from abc import ABC, abstractmethod

from urlshortener.models import LinkModel


class LinkBaseDAO(ABC):
    """Interface for Link data access objects (DAOs).

    Methods:
        all(**kwargs) -> list[LinkModel]:
            Return every link. Pagination is handled internally and stops with
            RequestTimeoutError once a `deadline` keyword argument has passed.
            Raises DataStoreError on connection or read failure.

        get(link_id: str, **kwargs) -> LinkModel:
            Retrieve a LinkModel by id.
            Raises LinkNotFoundError if the entry does not exist or has an empty URL.
            Raises DataStoreError on connection or read failure.

        insert(link: LinkModel, **kwargs) -> LinkBaseDAO:
            Insert a new LinkModel only if no link with the same id exists.
            Raises LinkAlreadyExistsError if the id is taken.
            Raises DataStoreError on connection or write failure.

        delete(link_id: str, **kwargs) -> LinkBaseDAO:
            Delete a LinkModel by id. Deleting a missing id is not an error.
            Raises DataStoreError on connection or write failure.

    Subclassing:
        Datastore-specific implementations (e.g., LinkDynamoDBDAO) must extend
        this class and implement all abstract methods. Implementations must be
        safe for concurrent use from multiple threads.
    """

    @abstractmethod
    def all(self, **kwargs) -> list[LinkModel]:
        """Return all links in the data store.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, link_id: str, **kwargs) -> LinkModel:
        """Retrieve a LinkModel from the data store by its id.

        Args:
            link_id (str):
                The short identifier of the link.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel: The stored link.

        Raises:
            LinkNotFoundError:
                If no link with the given id exists, or its URL is empty.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def insert(self, link: LinkModel, **kwargs) -> 'LinkBaseDAO':
        """Insert a new LinkModel into the data store, unless its id is taken.

        Args:
            link (LinkModel):
                The LinkModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkBaseDAO: self (for method chaining)

        Raises:
            LinkAlreadyExistsError:
                If a LinkModel with the same id already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, link_id: str, **kwargs) -> 'LinkBaseDAO':
        """Delete a LinkModel from the data store.

        Returns:
            LinkBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
