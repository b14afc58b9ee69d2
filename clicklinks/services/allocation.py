"""Shortcode allocation

Classes:
    AllocationService:
        Allocate new short links with a requested or a generated shortcode.

Example:
    >>> from clicklinks.dao.memory import ShortLinkMemoryDAO
    >>> service = AllocationService(ShortLinkMemoryDAO())
    >>> link = service.allocate('https://example.com', validity_minutes=60)
    >>> len(link.shortcode)
    7
    >>> service.allocate('https://example.com', shortcode='promo-2025').shortcode
    'promo-2025'
"""

import logging
from datetime import timedelta
from typing import Optional

from clicklinks.models import ShortLinkModel
from clicklinks.dao.base import ShortLinkBaseDAO
from clicklinks.dao.exceptions import ShortLinkAlreadyExistsError
from clicklinks.exceptions import AllocationExhaustedError, InvalidValidityError, ShortcodeTakenError
from clicklinks.types import Clock, ShortcodeGenerator
from clicklinks.utils.helpers import utcnow
from clicklinks.utils.shortener import generate_shortcode
from clicklinks.utils.validators import validate_shortcode, validate_url, validate_validity
from clicklinks.utils.constants import DEFAULT_VALIDITY_MINUTES, MAX_ALLOCATION_ATTEMPTS


logger = logging.getLogger(__name__)


class AllocationService:
    """Allocate short links on top of a ShortLinkBaseDAO

    Uniqueness is enforced solely by the DAO's atomic insert. The service never
    checks exists() before inserting: a collision is detected by the insert
    itself and either reported (requested shortcodes) or retried (generated ones).

    Attributes:
        dao (ShortLinkBaseDAO):
            Store the links are inserted into.
        generator (ShortcodeGenerator):
            Zero-argument callable returning a candidate shortcode.
        clock (Clock):
            Zero-argument callable returning the current aware datetime.
        max_attempts (int):
            Generated-shortcode insert attempts before giving up.
    """

    def __init__(
        self,
        dao: ShortLinkBaseDAO,
        generator: ShortcodeGenerator = generate_shortcode,
        clock: Clock = utcnow,
        max_attempts: int = MAX_ALLOCATION_ATTEMPTS,
    ):
        self.dao = dao
        self.generator = generator
        self.clock = clock
        self.max_attempts = max_attempts

    def allocate(
        self,
        target_url: str,
        validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        shortcode: Optional[str] = None,
    ) -> ShortLinkModel:
        """Allocate a new short link

        Args:
            target_url (str):
                Absolute http(s) URL to redirect to.
            validity_minutes (int):
                Minutes the link stays live. Defaults to 30.
            shortcode (Optional[str]):
                Requested shortcode. A random one is generated if omitted.

        Returns:
            ShortLinkModel: the inserted link (no clicks).

        Raises:
            InvalidUrlError, InvalidValidityError, InvalidShortcodeFormatError:
                If the inputs are malformed.
            ShortcodeTakenError:
                If the requested shortcode is already allocated (live or expired).
            AllocationExhaustedError:
                If every generated shortcode collided.
            DataStoreError:
                If the underlying store fails.
        """
        target_url = validate_url(target_url)
        validity_minutes = validate_validity(validity_minutes)
        if shortcode is not None:
            shortcode = validate_shortcode(shortcode)

        created_at = self.clock()
        try:
            expires_at = created_at + timedelta(minutes=validity_minutes)
        except OverflowError as e:
            # Expiry past datetime.max (year 9999) or beyond timedelta range
            raise InvalidValidityError('validity is too large (minutes).') from e

        if shortcode is not None:
            short_link = self._build(target_url, shortcode, created_at, expires_at)
            try:
                self.dao.insert(short_link)
            except ShortLinkAlreadyExistsError as e:
                logger.info('Requested shortcode is already taken.', extra={'shortcode': shortcode})
                raise ShortcodeTakenError('Provided shortcode already exists.') from e
            return short_link

        # NOTE: 62^7 codes make a single collision unlikely and repeated
        #       collisions a sign of a broken generator. The attempt bound is
        #       a circuit breaker, not a capacity limit.
        for attempt in range(1, self.max_attempts + 1):
            short_link = self._build(target_url, self.generator(), created_at, expires_at)
            try:
                self.dao.insert(short_link)
            except ShortLinkAlreadyExistsError:
                logger.warning(
                    'Generated shortcode collided with an existing link. Retrying.',
                    extra={'shortcode': short_link.shortcode, 'attempt': attempt},
                )
            else:
                return short_link

        logger.error('Unable to allocate a unique shortcode.', extra={'attempts': self.max_attempts})
        raise AllocationExhaustedError('Unable to allocate unique shortcode.')

    @staticmethod
    def _build(target_url, shortcode, created_at, expires_at) -> ShortLinkModel:
        return ShortLinkModel(
            target=target_url,
            shortcode=shortcode,
            created_at=created_at,
            expires_at=expires_at,
        )
