"""Input validation for short link requests

Functions:
    is_valid_url(url) -> bool
    is_valid_shortcode(shortcode) -> bool
    validate_url(url) -> str
    validate_shortcode(shortcode) -> str
    validate_validity(validity) -> int

The validate_*() variants return the (normalized) value or raise the matching
ShortLinkError subclass.
"""

import re
import urllib.parse
from typing import Any

from clicklinks.exceptions import InvalidShortcodeFormatError, InvalidUrlError, InvalidValidityError
from clicklinks.utils.constants import SHORTCODE_PATTERN


ALLOWED_URL_SCHEMES = frozenset({'http', 'https'})

_SHORTCODE_RE = re.compile(SHORTCODE_PATTERN)


def is_valid_url(url: Any) -> bool:
    """Check that `url` is an absolute http(s) URL with a host"""
    if not isinstance(url, str) or not url:
        return False
    try:
        components = urllib.parse.urlsplit(url)
        hostname = components.hostname
        components.port  # raises ValueError on out-of-range or non-numeric ports
    except ValueError:
        return False
    return components.scheme.lower() in ALLOWED_URL_SCHEMES and bool(hostname)


def is_valid_shortcode(shortcode: Any) -> bool:
    """Check that `shortcode` is 3-32 characters of letters, digits, '-' or '_'"""
    return isinstance(shortcode, str) and _SHORTCODE_RE.fullmatch(shortcode) is not None


def validate_url(url: Any) -> str:
    if not is_valid_url(url):
        raise InvalidUrlError('Provide a valid http(s) URL.')
    return url


def validate_shortcode(shortcode: Any) -> str:
    if not is_valid_shortcode(shortcode):
        raise InvalidShortcodeFormatError('Shortcode must be 3-32 chars, alphanumeric, dash or underscore.')
    return shortcode


def validate_validity(validity: Any) -> int:
    """Validate a link validity period given in minutes

    Integral floats (e.g. 5.0, as produced by some JSON encoders) are accepted
    and converted to int. Booleans are rejected even though they are ints.
    """
    if isinstance(validity, float) and validity.is_integer():
        validity = int(validity)
    if isinstance(validity, bool) or not isinstance(validity, int) or validity <= 0:
        raise InvalidValidityError('validity must be a positive integer (minutes).')
    return validity
