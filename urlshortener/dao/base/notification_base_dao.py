from abc import ABC, abstractmethod

from urlshortener.models import LinkModel


class NotificationBaseDAO(ABC):
    """Interface for publishing link lifecycle notifications.

    Methods:
        publish_link_created(link: LinkModel) -> None:
            Announce a newly created link.
            Raises NotificationError on failure.
    """

    @abstractmethod
    def publish_link_created(self, link: LinkModel) -> None:
        pass
