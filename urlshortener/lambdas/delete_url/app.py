import logging

from urlshortener.dao.exceptions import DataStoreError
from urlshortener.lambdas.dependencies import services
from urlshortener.lambdas.responses import response_204, response_400, response_500
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils.helpers import guarantee_500_response
from urlshortener.utils.deadline import Deadline


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Delete a link, then its stats

    Both deletes share one request deadline. The link delete is the
    operation of record. A failure deleting its stats leaves orphaned records
    (harmless, stats have no referential integrity) and is reported in the
    204 body rather than as an error.

    HTTP responses:
        204: Link deleted (body explains if stats deletion failed)
        400: Missing link id
        500: Links store unavailable
    """
    link_id = (event.get('pathParameters') or {}).get('id')
    if not link_id:
        return response_400('ID parameter is required')

    app = services()
    deadline = Deadline(app.settings.request_timeout)

    try:
        app.links.delete(link_id, deadline=deadline)
    except DataStoreError as e:
        logger.error('Failed to delete link. Responding with 500.', extra={'link_id': link_id, 'reason': str(e)})
        return response_500()

    if app.stats is not None:
        try:
            deleted = app.stats.delete(link_id, deadline=deadline)
        except DataStoreError as e:
            logger.error('Link deleted but its stats were not.', extra={'link_id': link_id, 'reason': str(e)})
            return response_204('Link deleted but stats deletion failed')
        logger.debug('Deleted %d stats record(s).', deleted, extra={'link_id': link_id})

    return response_204()
