"""Abstract base class for redirect stats data access objects (DAOs).

Stats records are append-only side data: they are written once per redirect,
read in bulk per link and only ever deleted together with their link.
"""

from abc import ABC, abstractmethod

from urlshortener.models import StatsModel


class StatsBaseDAO(ABC):
    """Interface for per-redirect stats data access objects (DAOs).

    Methods:
        insert(stats: StatsModel, **kwargs) -> StatsBaseDAO:
            Store a new stats record.
            Raises DataStoreError on write failure.

        by_link(link_id: str, **kwargs) -> list[StatsModel]:
            Return every stats record referencing a link (possibly empty).
            Raises DataStoreError on read failure.
            A `deadline` keyword argument stops pagination once it has passed.

        delete_by_link(link_id: str, **kwargs) -> int:
            Delete every stats record referencing a link, return how many.
            Raises DataStoreError on failure.

    NOTE:
        - There is no referential integrity with links: records may reference
          a link id that does not (or no longer) exist.
    """

    @abstractmethod
    def insert(self, stats: StatsModel, **kwargs) -> 'StatsBaseDAO':
        pass

    @abstractmethod
    def by_link(self, link_id: str, **kwargs) -> list[StatsModel]:
        pass

    @abstractmethod
    def delete_by_link(self, link_id: str, **kwargs) -> int:
        pass
