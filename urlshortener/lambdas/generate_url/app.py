import json
import base64
import logging

from urlshortener.exceptions import CollisionExhaustedError, ShortcodeGenerationError, ValidationError
from urlshortener.dao.exceptions import DataStoreError
from urlshortener.lambdas.dependencies import services
from urlshortener.lambdas.responses import response_201, response_400, response_500
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils.helpers import get_short_url, guarantee_500_response


logger = logging.getLogger(__name__)


def _request_body(event: LambdaEvent) -> dict:
    raw = event.get('body') or ''
    if event.get('isBase64Encoded') and raw:
        raw = base64.b64decode(raw).decode('utf-8')
    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError('JSON body must be an object')
    return body


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Parse the JSON request body ({"long": <url>})
    - Step 2: Validate the URL, generate an id and store the link (LinkService)
    - Step 3: Respond with the created link

    HTTP responses:
        201: Link created
            body: the link as JSON, plus its public `short_url`
        400: Bad client request
            body: 'Invalid JSON' or the validation failure reason (plain text)
        500: Internal server error
            body: 'Internal Server Error' (id space exhausted, store failure, ...)

    Example:
        >>> event = {'body': '{"long": "https://example.com/page/123"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['original_url']
        'https://example.com/page/123'
    """
    # 1- Parse request body
    try:
        body = _request_body(event)
    except ValueError:  # JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.info('Invalid JSON body. Responding with 400.')
        return response_400('Invalid JSON')

    # 2- Create the link
    try:
        link = services().links.create(body.get('long'))
    except ValidationError as e:
        logger.info('URL rejected. Responding with 400.', extra={'reason': str(e), 'error_code': e.error_code})
        return response_400(str(e))
    except (CollisionExhaustedError, ShortcodeGenerationError, DataStoreError) as e:
        logger.error('Failed to create link. Responding with 500.', extra={'error_code': e.error_code, 'reason': str(e)})
        return response_500()

    # 3- Respond with the created link
    return response_201({**link.to_dict(), 'short_url': get_short_url(link.id, event)})
