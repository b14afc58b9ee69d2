from datetime import datetime

from clicklinks.models import ShortLinkModel


def is_expired(short_link: ShortLinkModel, now: datetime) -> bool:
    """Check whether a short link's TTL has elapsed at `now`

    A link is still live at the exact moment of `expires_at`; it's expired
    only strictly after it. `now` is always supplied by the caller.

    Example:
        >>> is_expired(link, link.expires_at)
        False
        >>> is_expired(link, link.expires_at + timedelta(microseconds=1))
        True
    """
    return now > short_link.expires_at
