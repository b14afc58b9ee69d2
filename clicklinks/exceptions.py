"""Application errors raised by the short link services.

Every error is an expected outcome of a client request (bad input, unknown or
expired link, exhausted allocation). Each class carries the `error_code`
reported to clients and the HTTP `status_code` handlers respond with.

Unexpected failures (e.g. DataStoreError) are NOT part of this
hierarchy. They propagate to the Lambda handler and become a generic 500.
"""


class ShortLinkError(Exception):
    """Base exception for all short link errors."""

    error_code = 'SHORT_LINK_ERROR'
    status_code = 400


class InvalidUrlError(ShortLinkError):
    """Raised when a target URL is not an absolute http(s) URL."""

    error_code = 'INVALID_URL'
    status_code = 400


class InvalidValidityError(ShortLinkError):
    """Raised when the validity period is not a positive integer (minutes)."""

    error_code = 'INVALID_VALIDITY'
    status_code = 400


class InvalidShortcodeFormatError(ShortLinkError):
    """Raised when a requested shortcode doesn't match the shortcode format."""

    error_code = 'INVALID_SHORTCODE'
    status_code = 400


class ShortcodeTakenError(ShortLinkError):
    """Raised when a requested shortcode is already allocated (live or expired)."""

    error_code = 'SHORTCODE_TAKEN'
    status_code = 409


class AllocationExhaustedError(ShortLinkError):
    """Raised when generated shortcodes keep colliding past the retry bound."""

    error_code = 'GENERATION_FAILURE'
    status_code = 500


class LinkNotFoundError(ShortLinkError):
    """Raised when a shortcode was never allocated."""

    error_code = 'NOT_FOUND'
    status_code = 404


class LinkExpiredError(ShortLinkError):
    """Raised when resolving a short link past its expiry."""

    error_code = 'EXPIRED'
    status_code = 410
