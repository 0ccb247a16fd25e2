"""Shortcode generation utility

This module provides a helper function for deriving a short code from a long
URL. The mapping is a pure function of its input: the same URL (and seed)
always yields the same code, with no I/O and no shared state, so it is safe
to call speculatively any number of times.

Functions:
    generate_shortcode(long_url, seed=0):
        Render the 64-bit xxHash of a long URL as a 16-character hex string.

Example:
    >>> from shortlinks.utils import generate_shortcode
    >>> code = generate_shortcode('https://example.com/a')
    >>> len(code)
    16
"""

import xxhash

from shortlinks.constants import Shortcode


def generate_shortcode(long_url: str, seed: int = Shortcode.SEED) -> str:
    """Generate a deterministic, fixed-width short code from a long URL.

    The long URL is encoded to UTF-8 (lone surrogates are passed through with
    'surrogatepass', so every Python string is accepted) and hashed with the
    ultra-fast, non-cryptographic xxh64. The 64-bit digest is rendered as a
    zero-padded, 16-character lowercase hexadecimal string.

    Args:
        long_url (str):
            The long URL to shorten. Any string is accepted, including ''.

        seed (int, optional):
            xxh64 seed selecting an alternative hash family.
            Defaults to 0.

    Returns:
        str: 16 lowercase hexadecimal characters.

    Raises:
        TypeError: If long_url is not a string or seed is not an integer.
        ValueError: If seed is negative.

    NOTE:
        - Collisions are possible (64-bit space). They are detected by the
          store's uniqueness constraint at insert time, not avoided here.
        - This is not a security primitive: codes are trivially predictable.
    """
    if not isinstance(long_url, str):
        raise TypeError(f'Long URL must be of type string (given type: {type(long_url)}).')
    if not isinstance(seed, int) or isinstance(seed, bool):
        raise TypeError(f'Seed must be of type integer (given type: {type(seed)}).')
    if seed < 0:
        raise ValueError(f'Seed must be a non-negative integer (given value: {seed}).')

    return xxhash.xxh64_hexdigest(long_url.encode('utf-8', errors='surrogatepass'), seed=seed)
