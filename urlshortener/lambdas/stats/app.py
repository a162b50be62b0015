import logging

from urlshortener.dao.exceptions import DataStoreError
from urlshortener.lambdas.dependencies import services
from urlshortener.lambdas.responses import response_200, response_500
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils.helpers import guarantee_500_response
from urlshortener.utils.deadline import Deadline


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """List every link with its stats joined (200 JSON array, 500 on store failure)

    The listing and the stats join share one request deadline.
    """
    app = services()
    deadline = Deadline(app.settings.request_timeout)

    try:
        links = app.links.all(deadline=deadline)
    except DataStoreError as e:
        logger.error('Failed to list links. Responding with 500.', extra={'reason': str(e)})
        return response_500()

    if app.stats is not None:
        links = app.stats.join_stats_onto_links(links, deadline=deadline)

    return response_200([link.to_dict() for link in links])
