import logging

from clicklinks.types import LambdaEvent, LambdaContext, LambdaResponse, LambdaConfiguration
from clicklinks.dao.factory import short_link_dao
from clicklinks.exceptions import ShortLinkError
from clicklinks.services import ShortLinkService
from clicklinks.utils import load_config, get_short_url, ip_salt
from clicklinks.utils.helpers import client_ip, guarantee_500_response, header
from clicklinks.lambdas.responses import response_302, response_400, response_500, response_error
from clicklinks.lambdas.redirect_url.constants import MISSING_SHORTCODE, REDIRECT_REJECTED, REDIRECT_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the live short link and record the click
    - Step 3: Redirect client to target URL

    Click context taken from the request:
        referrer:   Referer (or Referrer) header
        client ip:  first X-Forwarded-For entry, else the API Gateway source IP
        geo hints:  X-Geo-Country / X-Geo-Region / X-Geo-City, else
                    CloudFront-Viewer-Country / -Country-Region / -City

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            error: MISSING_SHORTCODE
        404: Shortcode doesn't exist
            error: NOT_FOUND
        410: Short link expired
            error: EXPIRED
        500: Internal server error

    Args:
        event (dict):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'q3ZbT0x'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config: LambdaConfiguration = load_config('redirect_url')
    except FileNotFoundError:
        logger.exception('Failed to load AppConfig for redirect URL function. Responding with 500.')
        return response_500()

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if shortcode is None:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400("missing 'shortcode' in path", MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 2- Resolve the short link and record the click
    service = ShortLinkService(short_link_dao(app_config), salt=ip_salt())
    try:
        short_link = service.resolve(
            shortcode,
            client_ip=client_ip(event),
            referrer=header(event, 'Referer', 'Referrer'),
            country=header(event, 'X-Geo-Country', 'CloudFront-Viewer-Country'),
            region=header(event, 'X-Geo-Region', 'CloudFront-Viewer-Country-Region'),
            city=header(event, 'X-Geo-City', 'CloudFront-Viewer-City'),
        )
    except ShortLinkError as e:
        logger.info(
            'Redirect rejected. Responding with %s.',
            e.status_code,
            extra={'shortcode': shortcode, 'event': REDIRECT_REJECTED, 'errorCode': e.error_code},
        )
        return response_error(e)

    # 3- Redirect client to target URL
    logger.info('Redirecting client to target URL. Responding with 302.', extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS})
    return response_302(location=short_link.target)
