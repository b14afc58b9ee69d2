"""Data Access Object (DAO) implementation keeping short links in process memory

Responsibilities:
    - Insert and retrieve short links from an injectable mapping;
    - Guarantee shortcode uniqueness via an atomic insert-if-absent;
    - Append clicks without losing or tearing concurrent events.

Classes:
    ShortLinkMemoryDAO:
        DAO for storing and retrieving ShortLinkModel in a (thread-safe) mapping.

Example:
    >>> from clicklinks.dao.memory import ShortLinkMemoryDAO
    >>> dao = ShortLinkMemoryDAO()
    >>> dao.insert(short_link)
    <ShortLinkMemoryDAO records=1>
    >>> dao.exists('abc123')
    True
    >>> dao.append_click('abc123', click)
    1

NOTE:
    Nothing survives a process restart. Use ShortLinkRedisDAO to share links
    between processes.
"""

import logging
import threading
from typing import Optional
from collections.abc import MutableMapping

from beartype import beartype

from clicklinks.models import ShortLinkModel, ClickEventModel
from clicklinks.dao.base import ShortLinkBaseDAO
from clicklinks.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError


logger = logging.getLogger(__name__)


class ShortLinkMemoryDAO(ShortLinkBaseDAO):
    """In-memory Data Access Object (DAO) for short links

    A single store-wide lock guards every mutation. Critical sections are short
    and never block on I/O, so callers on an event loop may use the DAO directly.

    Reads take no lock: models are frozen and appends swap a whole new model
    into the mapping, so readers see a complete ledger either way.

    Attributes:
        records (MutableMapping[str, ShortLinkModel]):
            Backing mapping of shortcode -> short link.
    """

    def __init__(self, records: Optional[MutableMapping[str, ShortLinkModel]] = None):
        """Initialize an in-memory DAO

        Args:
            records (Optional[MutableMapping[str, ShortLinkModel]]):
                Backing mapping to store links in. Defaults to a new empty dict.
                The DAO takes ownership: nothing else may mutate the mapping.
        """
        self.records = {} if records is None else records
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} records={len(self.records)}>'

    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return shortcode in self.records

    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        try:
            return self.records[shortcode]
        except KeyError as e:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.") from e

    @beartype
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkMemoryDAO':
        """Insert a short link if its shortcode is still free

        Raises:
            ShortLinkAlreadyExistsError:
                If a short link with the same shortcode already exists.
        """
        # NOTE: The membership test and the write happen under the same lock.
        #       Two separate calls (exists() then insert()) would let two
        #       concurrent requests both see a free shortcode:
        #
        #       (request 1): exists('abc123') => False
        #       (request 2): exists('abc123') => False
        #       (request 1): records['abc123'] = link 1
        #       (request 2): records['abc123'] = link 2  => link 1 is silently lost
        with self._lock:
            if short_link.shortcode in self.records:
                raise ShortLinkAlreadyExistsError(f"Short link with code '{short_link.shortcode}' already exists.")
            self.records[short_link.shortcode] = short_link
        return self

    @beartype
    def append_click(self, shortcode: str, click: ClickEventModel, **kwargs) -> int:
        """Append a click to a short link's ledger

        Returns:
            int: total clicks recorded for the link after the append.

        Raises:
            ShortLinkNotFoundError:
                If no short link with the given shortcode exists.
        """
        with self._lock:
            short_link = self.records.get(shortcode)
            if short_link is None:
                raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
            updated = short_link.with_click(click)
            self.records[shortcode] = updated

        logger.debug('Recorded click for short link %s.', shortcode, extra={'shortcode': shortcode, 'totalClicks': updated.total_clicks})
        return updated.total_clicks
