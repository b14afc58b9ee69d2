from datetime import datetime, timedelta, UTC

import pytest

from clicklinks.models import ShortLinkModel, ClickEventModel, GeoModel
from clicklinks.dao.memory import ShortLinkMemoryDAO


T0 = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock injected into services."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def short_link() -> ShortLinkModel:
    return ShortLinkModel(
        target='https://example.com/blog/article-123',
        shortcode='abc123',
        created_at=T0,
        expires_at=T0 + timedelta(minutes=30),
    )


@pytest.fixture
def click() -> ClickEventModel:
    return ClickEventModel(
        ts=T0 + timedelta(minutes=1),
        referrer='https://news.ycombinator.com/',
        geo=GeoModel(country='BG', region='Sofia City', city='Sofia', ip_prefix='203.0.x.x', ip_hash='0123456789abcdef'),
    )


@pytest.fixture
def memory_dao() -> ShortLinkMemoryDAO:
    return ShortLinkMemoryDAO()
