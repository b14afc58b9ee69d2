"""Client address obfuscation

Raw client addresses never reach the click ledger. Instead, each visit stores:
    - ip_hash:   16 hex characters of SHA-256(address + salt), which lets
                 analytics count repeat visitors without revealing who they are;
    - ip_prefix: a coarsened network prefix, e.g. '203.0.x.x' or '2001::/64'.

Functions:
    obfuscate_ip(address, salt) -> ObfuscatedIp

Example:
    >>> obfuscate_ip('203.0.113.7', 'pepper')
    ObfuscatedIp(ip_hash='<16 hex chars>', ip_prefix='203.0.x.x')
    >>> obfuscate_ip('2001:db8::1', 'pepper').ip_prefix
    '2001::/64'
"""

import hashlib
import logging
from typing import NamedTuple

from clicklinks.utils.constants import UNKNOWN_IP_HASH, UNKNOWN_IP_PREFIX


logger = logging.getLogger(__name__)

IP_HASH_LENGTH = 16
IPV4_MASK = 'x.x'
IPV6_MASK = '::/64'


class ObfuscatedIp(NamedTuple):
    ip_hash: str
    ip_prefix: str


def _ip_prefix(address: str) -> str:
    if '.' in address:
        octets = address.split('.')
        if len(octets) >= 2 and all(octets[:2]):
            return f'{octets[0]}.{octets[1]}.{IPV4_MASK}'
    elif ':' in address:
        # "::1" has an empty first segment and becomes "::/64"
        first_segment = address.split(':')[0]
        return f'{first_segment}{IPV6_MASK}'
    return UNKNOWN_IP_PREFIX


def obfuscate_ip(address: str, salt: str) -> ObfuscatedIp:
    """Derive a salted hash and a coarse network prefix from a client address

    The hash is deterministic for a fixed address + salt and changes
    unpredictably with the salt. Neither field contains the raw address.

    This function never raises: recording a click must not fail because of a
    malformed address. Any processing failure yields ('na', 'unknown').

    Args:
        address (str):
            Raw client address, e.g. '203.0.113.7' or '2001:db8::1'.
        salt (str):
            Secret salt mixed into the hash.

    Returns:
        ObfuscatedIp: named tuple of (ip_hash, ip_prefix).
    """
    try:
        ip_hash = hashlib.sha256(f'{address}{salt}'.encode('utf-8')).hexdigest()[:IP_HASH_LENGTH]
        ip_prefix = _ip_prefix(address.strip())
    except (AttributeError, TypeError, UnicodeError):
        logger.warning('Failed to obfuscate client address. Storing placeholders.', exc_info=True)
        return ObfuscatedIp(ip_hash=UNKNOWN_IP_HASH, ip_prefix=UNKNOWN_IP_PREFIX)
    return ObfuscatedIp(ip_hash=ip_hash, ip_prefix=ip_prefix)
