from clicklinks.types import LambdaEvent, LambdaContext, LambdaResponse
from clicklinks.models.short_link_model import to_iso
from clicklinks.utils.helpers import guarantee_500_response, utcnow
from clicklinks.lambdas.responses import response_json


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Report liveness of the API (GET /health)

    Doesn't touch the link store, so it stays green while the store is down.
    """
    return response_json(200, {'status': 'ok', 'time': to_iso(utcnow())})
