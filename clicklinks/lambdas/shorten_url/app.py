import json
import logging

from clicklinks.types import LambdaEvent, LambdaContext, LambdaResponse, LambdaConfiguration
from clicklinks.dao.factory import short_link_dao
from clicklinks.exceptions import ShortLinkError
from clicklinks.models.short_link_model import to_iso
from clicklinks.services import ShortLinkService
from clicklinks.utils import load_config, get_short_url, ip_salt
from clicklinks.utils.helpers import guarantee_500_response
from clicklinks.lambdas.responses import response_400, response_500, response_error, response_json
from clicklinks.lambdas.shorten_url.constants import INVALID_JSON, SHORT_LINK_CREATED, SHORT_LINK_REJECTED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Parse the JSON request body
    - Step 2: Allocate a short link (requested or generated shortcode)
    - Step 3: Respond to user with 201 created

    Request body:
        url: target URL (required, absolute http(s))
        validity: minutes the link stays live (optional, positive integer, default 30)
        shortcode: custom shortcode (optional, 3-32 chars of [A-Za-z0-9_-])

    HTTP responses:
        201: Short link created
            shortLink: public short URL
            expiry: ISO-8601 expiry timestamp
            shortcode: allocated shortcode
        400: Bad client request
            error: INVALID_JSON | INVALID_URL | INVALID_VALIDITY | INVALID_SHORTCODE
        409: Requested shortcode already exists
            error: SHORTCODE_TAKEN
        500: Internal server error
            error: GENERATION_FAILURE when no unique shortcode could be generated

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy output format.

    Example:
        >>> event = {'body': '{"url": "https://example.com", "validity": 60}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['shortLink']
        'http://localhost:3000/q3ZbT0x'
    """
    # 0- Get application's config
    try:
        app_config: LambdaConfiguration = load_config('shorten_url')
    except FileNotFoundError:
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.')
        return response_500()

    # 1- Parse request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        request_body = None
    if not isinstance(request_body, dict):
        logger.info('Invalid JSON request body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400('Request body must be a JSON object.', INVALID_JSON)

    # 2- Allocate the short link
    service = ShortLinkService(short_link_dao(app_config), salt=ip_salt())
    try:
        short_link = service.shorten(
            request_body.get('url'),
            validity_minutes=request_body.get('validity'),
            shortcode=request_body.get('shortcode') or None,
        )
    except ShortLinkError as e:
        logger.info(
            'Short link request rejected. Responding with %s.',
            e.status_code,
            extra={'event': SHORT_LINK_REJECTED, 'errorCode': e.error_code},
        )
        return response_error(e)

    # 3- Respond with the new short link
    logger.info('Short link created. Responding with 201.', extra={'shortcode': short_link.shortcode, 'event': SHORT_LINK_CREATED})
    return response_json(
        201,
        {
            'shortLink': get_short_url(short_link.shortcode, event),
            'expiry': to_iso(short_link.expires_at),
            'shortcode': short_link.shortcode,
        },
    )
