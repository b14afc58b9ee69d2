from clicklinks.services.allocation import AllocationService
from clicklinks.services.short_link_service import ShortLinkService


__all__ = [
    'AllocationService',
    'ShortLinkService',
]
