"""Shortcode generation utility

This module provides a helper function for generating random, fixed-length,
non-sequential shortcodes suitable as public identifiers.

Functions:
    generate_shortcode(length=7, alphabet=SHORTCODE_ALPHABET):
        Generate a random shortcode suitable for use as a URL slug.

Example:
    >>> from clicklinks.utils import generate_shortcode
    >>> generate_shortcode()
    'q3ZbT0x'
"""

import secrets

from clicklinks.utils.constants import SHORTCODE_ALPHABET, SHORTCODE_LENGTH


def generate_shortcode(length: int = SHORTCODE_LENGTH, alphabet: str = SHORTCODE_ALPHABET) -> str:
    """Generate a random shortcode of fixed length

    Each character is drawn independently and uniformly from `alphabet` using
    the operating system's CSPRNG (`secrets`). Consecutive codes share no
    structure, so they leak neither creation order nor creation time.

    Args:
        length (int, optional):
            Exact length of the resulting shortcode. Defaults to 7.

        alphabet (str, optional):
            Symbols to draw from. Defaults to the 62 Base62 symbols [A-Za-z0-9].

    Returns:
        str: A random shortcode.

    Raises:
        ValueError:
            If length is not positive or the alphabet is empty.

    NOTE:
        - Uniqueness is NOT checked here. With 62^7 (~3.5e12) possible codes
          collisions are rare; the allocation service retries them.
    """
    if length <= 0:
        raise ValueError(f'Shortcode length must be a positive integer (given value: {length}).')
    if not alphabet:
        raise ValueError('Shortcode alphabet must be a non-empty string.')

    return ''.join(secrets.choice(alphabet) for _ in range(length))
