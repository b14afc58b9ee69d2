import logging

from clicklinks.types import LambdaEvent, LambdaContext, LambdaResponse, LambdaConfiguration
from clicklinks.dao.factory import short_link_dao
from clicklinks.exceptions import ShortLinkError
from clicklinks.services import ShortLinkService
from clicklinks.utils import load_config
from clicklinks.utils.helpers import guarantee_500_response
from clicklinks.lambdas.responses import response_400, response_500, response_error, response_json
from clicklinks.lambdas.link_stats.constants import MISSING_SHORTCODE, STATS_REJECTED, STATS_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for short link statistics

    Expired links are still reported. Click entries never contain raw client
    addresses, only the obfuscated geo data recorded with each click.

    HTTP responses:
        200: Link statistics
            shortcode, originalUrl, createdAt, expiry, totalClicks,
            clicks: [{ts, referrer, geo: {country, region, city, ipPrefix, ipHash}}]
        400: Bad client request
            error: MISSING_SHORTCODE
        404: Shortcode doesn't exist
            error: NOT_FOUND
        500: Internal server error
    """
    # 0- Get application's config
    try:
        app_config: LambdaConfiguration = load_config('link_stats')
    except FileNotFoundError:
        logger.exception('Failed to load AppConfig for link stats function. Responding with 500.')
        return response_500()

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if shortcode is None:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400("missing 'shortcode' in path", MISSING_SHORTCODE)

    # 2- Project the short link and its clicks
    service = ShortLinkService(short_link_dao(app_config))
    try:
        stats = service.inspect(shortcode)
    except ShortLinkError as e:
        logger.info(
            'Stats request rejected. Responding with %s.',
            e.status_code,
            extra={'shortcode': shortcode, 'event': STATS_REJECTED, 'errorCode': e.error_code},
        )
        return response_error(e)

    logger.info('Responding with link stats.', extra={'shortcode': shortcode, 'event': STATS_SUCCESS, 'totalClicks': stats['totalClicks']})
    return response_json(200, stats)
