import logging

from urlshortener.constants import LINK_NOT_FOUND, REDIRECT_SUCCESS
from urlshortener.dao.exceptions import DataStoreError, LinkNotFoundError
from urlshortener.lambdas.dependencies import services
from urlshortener.lambdas.responses import response_301, response_400, response_404, response_500
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils.helpers import detect_platform, guarantee_500_response, path_id


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short links

    This Lambda handler follows this procedure to redirect:
    - Step 1: Extract the link id from the request path
    - Step 2: Resolve the original URL (cache first, then the links store)
    - Step 3: Schedule stats recording (detached, never delays the response)
    - Step 4: Redirect client to the original URL

    HTTP responses:
        301: Successful redirect
            headers:
                Location: original URL
                Cache-Control: public, max-age=300
        400: Empty link id
        404: Unknown link
        500: Links store unavailable

    Example:
        >>> event = {'rawPath': '/aZ3kP9qL', 'headers': {'user-agent': 'Instagram 300.0'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode'], response['headers']['Location']
        (301, 'https://example.com/page/123')
    """
    # 1- Extract link id from path
    link_id = path_id(event)
    if not link_id:
        logger.info('Missing link id in path. Responding with 400.')
        return response_400('Short link key cannot be empty')

    app = services()

    # 2- Resolve original URL
    try:
        original_url = app.links.resolve(link_id)
    except LinkNotFoundError:
        logger.info('Link not found. Responding with 404.', extra={'link_id': link_id, 'event': LINK_NOT_FOUND})
        return response_404()
    except DataStoreError as e:
        logger.error('Links store unavailable. Responding with 500.', extra={'link_id': link_id, 'reason': str(e)})
        return response_500()

    # 3- Record the redirect
    if app.stats is not None:
        app.stats.schedule_record(link_id, detect_platform(event))

    # 4- Redirect client
    logger.info('Redirecting client. Responding with 301.', extra={'link_id': link_id, 'event': REDIRECT_SUCCESS})
    return response_301(location=original_url)
