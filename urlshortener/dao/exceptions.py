"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a link is not found (or has an empty URL) in the data store.

    LinkAlreadyExistsError:
        Raised when a conditional insert hits an existing link id.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, throttling, etc.).

    RequestTimeoutError:
        DataStoreError raised when a call outlives the request's deadline.

    CacheError:
        Base class for cache failures. Never fatal to a request.

    CacheMissError / CachePutError / CacheDeleteError:
        Raised when reading, writing or invalidating a cache entry fails.

    NotificationError:
        Raised when publishing to the notification queue fails.

Example:
    >>> from urlshortener.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with id 'aZ3kP9qL' not found.")
    Traceback (most recent call last):
        ...
    urlshortener.dao.exceptions.LinkNotFoundError: Link with id 'aZ3kP9qL' not found.
"""

from urlshortener.exceptions import UrlShortenerError


class DAOError(UrlShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class LinkNotFoundError(DAOError):
    """Raised when a LinkModel is not found in the data store."""

    error_code = 'dao:link_not_found_error'


class LinkAlreadyExistsError(DAOError):
    """Raised when inserting a LinkModel whose id already exists in the data store."""

    error_code = 'dao:link_already_exists_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and throttling.
    """

    error_code = 'dao:data_store_error'


class CacheError(DAOError):
    """Base class for cache failures."""

    error_code = 'dao:cache_error'


class CacheMissError(CacheError):
    """Raised when a cache entry cannot be read (transport failure)."""

    error_code = 'dao:cache_miss_error'


class CachePutError(CacheError):
    """Raised when writing or updating a cache entry fails."""

    error_code = 'dao:cache_put_error'


class CacheDeleteError(CacheError):
    """Raised when invalidating a cache entry fails."""

    error_code = 'dao:cache_delete_error'


class NotificationError(DAOError):
    """Raised when a notification cannot be published."""

    error_code = 'dao:notification_error'


class RequestTimeoutError(DataStoreError):
    """Raised when a store or cache call does not finish before the request's deadline."""

    error_code = 'dao:request_timeout_error'
