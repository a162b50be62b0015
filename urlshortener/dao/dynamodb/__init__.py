from urlshortener.dao.dynamodb.mixins import DynamoDBClientMixin
from urlshortener.dao.dynamodb.link_dynamodb_dao import LinkDynamoDBDAO
from urlshortener.dao.dynamodb.stats_dynamodb_dao import StatsDynamoDBDAO


__all__ = [
    'DynamoDBClientMixin',
    'LinkDynamoDBDAO',
    'StatsDynamoDBDAO',
]
