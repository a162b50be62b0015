"""SQS publisher for link lifecycle notifications.

A downstream consumer (e.g. a chat notifier) subscribes to the queue. Publishing
is best-effort and always runs as detached work, never on the request path.
"""

import os
import logging

import boto3
from beartype import beartype
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from urlshortener.constants import ENV, Defaults
from urlshortener.models import LinkModel
from urlshortener.dao.base import NotificationBaseDAO
from urlshortener.dao.exceptions import NotificationError
from urlshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)


class LinkNotificationSQSDAO(NotificationBaseDAO):
    def __init__(
        self,
        queue_url: str,
        sqs_client: BaseClient | None = None,
        timeout: float = Defaults.TASK_TIMEOUT,
    ):
        if sqs_client is None and queue_url:
            # fmt: off
            client_kwargs = {
                'endpoint_url': os.environ.get(ENV.LocalStack.ENDPOINT, 'http://localhost:4566'),
            } if running_locally() else {}
            # fmt: on
            config = Config(connect_timeout=timeout, read_timeout=timeout)
            sqs_client = boto3.client('sqs', config=config, **client_kwargs)

        self.queue_url = queue_url
        self.client = sqs_client

    @beartype
    def publish_link_created(self, link: LinkModel) -> None:
        """Send a 'link created' message to the queue

        Does nothing (apart from a log line) when no queue URL is configured.

        Raises:
            NotificationError:
                If SQS rejects the message or cannot be reached.
        """
        if not self.queue_url:
            logger.info('QueueUrl is not set, skipping notification.', extra={'link_id': link.id})
            return

        try:
            self.client.send_message(
                QueueUrl=self.queue_url,
                MessageBody=f'The system generated a short URL with the ID {link.id}',
            )
        except (BotoCoreError, ClientError) as e:
            raise NotificationError(f'Failed to publish link-created notification for {link.id!r}.') from e
