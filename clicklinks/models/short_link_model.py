"""Short link records and the click events recorded against them.

Classes:
    GeoModel:
        Coarse origin of a visit (caller-supplied geo hints + obfuscated IP).
    ClickEventModel:
        One recorded visit of a short link.
    ShortLinkModel:
        Shortcode -> target URL mapping with a TTL and an append-only click ledger.

All models are frozen. Recording a click never mutates a stored model: the
store swaps in the copy returned by ShortLinkModel.with_click(), so a reader
sees either the old ledger or the new one, never a partially written click.

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> now = datetime.now(UTC)
    >>> link = ShortLinkModel(
    ...     target='https://example.com',
    ...     shortcode='abc123',
    ...     created_at=now,
    ...     expires_at=now + timedelta(minutes=30),
    ... )
    >>> link.total_clicks
    0
    >>> link.with_click(ClickEventModel(ts=now)).total_clicks
    1
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, UTC
from typing import Any, Optional

from clicklinks.utils.constants import UNKNOWN_IP_HASH, UNKNOWN_IP_PREFIX


def to_iso(dt: datetime) -> str:
    """Serialize a datetime as an ISO-8601 UTC string with millisecond precision, e.g. '2025-10-15T12:00:00.000Z'"""
    return dt.astimezone(UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def from_iso(value: str) -> datetime:
    """Parse an ISO-8601 string produced by to_iso() back into an aware datetime"""
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


@dataclass(frozen=True)
class GeoModel:
    """Coarse geolocation of a single visit.

    Attributes:
        country, region, city (Optional[str]):
            Already-resolved hints supplied by the caller (unvalidated).
        ip_prefix (str):
            Coarsened network prefix of the visitor, e.g. '203.0.x.x'.
        ip_hash (str):
            Salted one-way hash of the visitor's address.

    NOTE: the raw client address and the salt are never part of this model.
    """

    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    ip_prefix: str = UNKNOWN_IP_PREFIX
    ip_hash: str = UNKNOWN_IP_HASH

    def to_dict(self) -> dict[str, Any]:
        return {
            'country': self.country,
            'region': self.region,
            'city': self.city,
            'ipPrefix': self.ip_prefix,
            'ipHash': self.ip_hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'GeoModel':
        return cls(
            country=data.get('country'),
            region=data.get('region'),
            city=data.get('city'),
            ip_prefix=data.get('ipPrefix', UNKNOWN_IP_PREFIX),
            ip_hash=data.get('ipHash', UNKNOWN_IP_HASH),
        )


@dataclass(frozen=True)
class ClickEventModel:
    """One recorded visit of a short link."""

    ts: datetime
    referrer: Optional[str] = None
    geo: GeoModel = field(default_factory=GeoModel)

    def to_dict(self) -> dict[str, Any]:
        return {
            'ts': to_iso(self.ts),
            'referrer': self.referrer,
            'geo': self.geo.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ClickEventModel':
        return cls(
            ts=from_iso(data['ts']),
            referrer=data.get('referrer'),
            geo=GeoModel.from_dict(data.get('geo') or {}),
        )


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a short link and its click ledger.

    Attributes:
        target (str):
            The original absolute http(s) URL the shortcode redirects to.
        shortcode (str):
            The unique short identifier of the link.
        created_at (datetime):
            Moment the link was allocated.
        expires_at (datetime):
            Moment after which the link no longer redirects.
            Always strictly after created_at.
        clicks (tuple[ClickEventModel, ...]):
            Recorded visits in insertion order.

    Raises:
        ValueError:
            If expires_at is not strictly after created_at.
    """

    target: str
    shortcode: str
    created_at: datetime
    expires_at: datetime
    clicks: tuple[ClickEventModel, ...] = ()

    def __post_init__(self):
        if self.expires_at <= self.created_at:
            raise ValueError(f"Short link '{self.shortcode}' must expire after it is created (created_at={self.created_at}, expires_at={self.expires_at}).")

    @property
    def total_clicks(self) -> int:
        return len(self.clicks)

    def with_click(self, click: ClickEventModel) -> 'ShortLinkModel':
        """Return a copy of this link with `click` appended to its ledger"""
        return replace(self, clicks=(*self.clicks, click))

    def to_dict(self, include_clicks: bool = True) -> dict[str, Any]:
        """Project the link into a JSON-serializable dict

        The projection never contains raw client addresses, only the
        obfuscated geo data recorded with each click.
        """
        data = {
            'shortcode': self.shortcode,
            'target': self.target,
            'createdAt': to_iso(self.created_at),
            'expiresAt': to_iso(self.expires_at),
        }
        if include_clicks:
            data['totalClicks'] = self.total_clicks
            data['clicks'] = [click.to_dict() for click in self.clicks]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], clicks: Optional[list[dict[str, Any]]] = None) -> 'ShortLinkModel':
        """Rebuild a link from to_dict() output

        Args:
            data (dict):
                Output of to_dict(); its 'clicks' entry is used unless `clicks` is given.
            clicks (Optional[list[dict]]):
                Click dicts stored apart from the record (e.g. a Redis list).
        """
        if clicks is None:
            clicks = data.get('clicks', [])
        return cls(
            target=data['target'],
            shortcode=data['shortcode'],
            created_at=from_iso(data['createdAt']),
            expires_at=from_iso(data['expiresAt']),
            clicks=tuple(ClickEventModel.from_dict(click) for click in clicks),
        )
