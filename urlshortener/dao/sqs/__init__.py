from urlshortener.dao.sqs.link_notification_sqs_dao import LinkNotificationSQSDAO


__all__ = ['LinkNotificationSQSDAO']
