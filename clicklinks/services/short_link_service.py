"""Short link operations consumed by the Lambda handlers

Classes:
    ShortLinkService:
        shorten()  - create a short link (requested or generated shortcode)
        resolve()  - look up a live link and record the visit
        inspect()  - project a link and its click ledger for statistics

Example:
    >>> from clicklinks.dao.memory import ShortLinkMemoryDAO
    >>> service = ShortLinkService(ShortLinkMemoryDAO(), salt='pepper')
    >>> link = service.shorten('https://example.com', validity_minutes=1)
    >>> service.resolve(link.shortcode, client_ip='203.0.113.7').target
    'https://example.com'
    >>> service.inspect(link.shortcode)['totalClicks']
    1
"""

import logging
from typing import Any, Optional

from clicklinks.models import ShortLinkModel, ClickEventModel, GeoModel
from clicklinks.dao.base import ShortLinkBaseDAO
from clicklinks.dao.exceptions import ShortLinkNotFoundError
from clicklinks.exceptions import LinkExpiredError, LinkNotFoundError
from clicklinks.services.allocation import AllocationService
from clicklinks.types import Clock, ShortcodeGenerator
from clicklinks.utils.expiry import is_expired
from clicklinks.utils.helpers import utcnow
from clicklinks.utils.obfuscation import obfuscate_ip
from clicklinks.utils.shortener import generate_shortcode
from clicklinks.utils.constants import DEFAULT_VALIDITY_MINUTES, MAX_ALLOCATION_ATTEMPTS


logger = logging.getLogger(__name__)


class ShortLinkService:
    """Create, resolve and inspect short links

    Args:
        dao (ShortLinkBaseDAO):
            Link store. The service never synchronizes on its own; every
            concurrency guarantee comes from the DAO's atomic operations.
        salt (str):
            Secret salt for client address hashes.
        clock (Clock):
            Source of the current time. Defaults to utcnow().
        generator (ShortcodeGenerator):
            Source of candidate shortcodes. Defaults to generate_shortcode().
        max_attempts (int):
            Generated-shortcode insert attempts before giving up.
    """

    def __init__(
        self,
        dao: ShortLinkBaseDAO,
        salt: str = '',
        clock: Clock = utcnow,
        generator: ShortcodeGenerator = generate_shortcode,
        max_attempts: int = MAX_ALLOCATION_ATTEMPTS,
    ):
        self.dao = dao
        self.salt = salt
        self.clock = clock
        self.allocator = AllocationService(dao, generator=generator, clock=clock, max_attempts=max_attempts)

    def shorten(
        self,
        target_url: str,
        validity_minutes: Optional[int] = None,
        shortcode: Optional[str] = None,
    ) -> ShortLinkModel:
        """Create a short link (see AllocationService.allocate())

        A missing validity (None) falls back to the default of 30 minutes.
        """
        if validity_minutes is None:
            validity_minutes = DEFAULT_VALIDITY_MINUTES
        short_link = self.allocator.allocate(target_url, validity_minutes=validity_minutes, shortcode=shortcode)
        logger.info(
            'Short link created.',
            extra={'shortcode': short_link.shortcode, 'target': short_link.target, 'expiresAt': short_link.expires_at.isoformat()},
        )
        return short_link

    def resolve(
        self,
        shortcode: str,
        *,
        client_ip: str,
        referrer: Optional[str] = None,
        country: Optional[str] = None,
        region: Optional[str] = None,
        city: Optional[str] = None,
    ) -> ShortLinkModel:
        """Resolve a live short link and record the visit

        The raw client address is only used to derive the obfuscated geo data.
        It's never stored or logged.

        Args:
            shortcode (str):
                The visited shortcode.
            client_ip (str):
                Raw address of the visitor.
            referrer, country, region, city (Optional[str]):
                Request context recorded with the click as-is.

        Returns:
            ShortLinkModel: the link as read before the visit (use `.target` to redirect).

        Raises:
            LinkNotFoundError:
                If the shortcode was never allocated.
            LinkExpiredError:
                If the link is past its expiry. No click is recorded.
        """
        short_link = self._get(shortcode)

        now = self.clock()
        if is_expired(short_link, now):
            logger.info('Short link expired.', extra={'shortcode': shortcode, 'expiresAt': short_link.expires_at.isoformat()})
            raise LinkExpiredError('The short link has expired.')

        obfuscated = obfuscate_ip(client_ip, self.salt)
        click = ClickEventModel(
            ts=now,
            referrer=referrer,
            geo=GeoModel(
                country=country,
                region=region,
                city=city,
                ip_prefix=obfuscated.ip_prefix,
                ip_hash=obfuscated.ip_hash,
            ),
        )

        try:
            total_clicks = self.dao.append_click(shortcode, click)
        except ShortLinkNotFoundError as e:  # pragma: no cover
            # Links are never deleted; only a store wiped between the two calls gets here
            raise LinkNotFoundError('Shortcode does not exist.') from e

        logger.info(
            'Click recorded.',
            extra={'shortcode': shortcode, 'referrer': referrer, 'geo': click.geo.to_dict(), 'totalClicks': total_clicks},
        )
        return short_link

    def inspect(self, shortcode: str) -> dict[str, Any]:
        """Project a short link and its clicks for statistics

        Expired links remain inspectable.

        Returns:
            dict: shortcode, originalUrl, createdAt, expiry, totalClicks and
                  clicks (ts, referrer, geo), timestamps as ISO-8601 UTC strings.

        Raises:
            LinkNotFoundError:
                If the shortcode was never allocated.
        """
        record = self._get(shortcode).to_dict()
        return {
            'shortcode': record['shortcode'],
            'originalUrl': record['target'],
            'createdAt': record['createdAt'],
            'expiry': record['expiresAt'],
            'totalClicks': record['totalClicks'],
            'clicks': record['clicks'],
        }

    def _get(self, shortcode: str) -> ShortLinkModel:
        try:
            return self.dao.get(shortcode)
        except ShortLinkNotFoundError as e:
            logger.info('Short link not found.', extra={'shortcode': shortcode})
            raise LinkNotFoundError('Shortcode does not exist.') from e
