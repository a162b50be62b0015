import logging

from urlshortener.dao.exceptions import DataStoreError
from urlshortener.lambdas.dependencies import services
from urlshortener.lambdas.responses import response_200, response_400, response_500
from urlshortener.models import LinkStatsSummary
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils.helpers import guarantee_500_response


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Per-link stats summary

    HTTP responses:
        200: {link_id, total_clicks, platform_counts, details}
        400: Missing link id
        500: Stats store unavailable
    """
    link_id = (event.get('pathParameters') or {}).get('id')
    if not link_id:
        return response_400('Link ID is required')

    app = services()
    if app.stats is None:
        return response_200(LinkStatsSummary(link_id=link_id).to_dict())

    try:
        summary = app.stats.aggregate_by_link(link_id)
    except DataStoreError as e:
        logger.error('Failed to aggregate stats. Responding with 500.', extra={'link_id': link_id, 'reason': str(e)})
        return response_500()

    return response_200(summary.to_dict())
