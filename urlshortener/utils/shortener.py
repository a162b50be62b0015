"""Shortcode generation utility

This module provides the identifier generator used for new short links.
Identifiers are drawn uniformly and independently from a Base62 alphabet
using the operating system's cryptographically secure random source.

Functions:
    generate_shortcode(length=8):
        Generate an unguessable, fixed-length URL slug.

Example:
    >>> from urlshortener.utils import generate_shortcode
    >>> generate_shortcode()
    'q8ZrT0bK'

NOTE:
    Uniqueness is NOT guaranteed here. The authoritative store enforces it
    through a conditional insert and the caller retries on collision.
"""

import secrets
import string

from urlshortener.constants import Shortcode
from urlshortener.exceptions import ShortcodeGenerationError


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_shortcode(length: int = Shortcode.LENGTH) -> str:
    """Generate a random Base62 shortcode of exactly `length` characters.

    Args:
        length (int, optional):
            Number of characters in the shortcode. Defaults to 8.

    Returns:
        str: A random alphanumeric shortcode.

    Raises:
        TypeError:
            If length is not an integer.
        ValueError:
            If length is not positive.
        ShortcodeGenerationError:
            If the secure random source is unavailable. There is deliberately
            no fallback to a predictable (e.g. time-derived) source.

    Example:
        >>> len(generate_shortcode(8))
        8
    """
    if isinstance(length, bool) or not isinstance(length, int):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    try:
        return ''.join(secrets.choice(ALPHABET) for _ in range(length))
    except (OSError, NotImplementedError) as e:
        raise ShortcodeGenerationError('Secure random source unavailable, refusing to generate a shortcode.') from e
