"""Shortcode generation and validation utilities

This module provides helpers for generating short, URL-safe Base62 codes,
either deterministically from a numeric counter and a secret salt, or
randomly from a cryptographically secure source.

Functions:
    generate_shortcode(counter, salt='default_salt', length=7, mult=1315423911):
        Generate a short, non-sequential hash of a counter, suitable for use as a URL slug.
    random_shortcode(length=7):
        Generate a random shortcode.
    is_valid_shortcode(code):
        Check whether a string could be a shortcode (alphabet and length).

Example:
    >>> from shortlink.utils import generate_shortcode, is_valid_shortcode
    >>> code = generate_shortcode(12345, salt='my_secret')
    >>> len(code)
    7
    >>> is_valid_shortcode(code)
    True
    >>> is_valid_shortcode('!!!')
    False
"""

import math
import re
import secrets

import xxhash

from shortlink.constants import Shortcode


ALPHABET = Shortcode.ALPHABET
BASE = len(ALPHABET)

SHORTCODE_PATTERN = re.compile(rf'[A-Za-z0-9]{{{Shortcode.MIN_LENGTH},{Shortcode.MAX_LENGTH}}}')


def generate_shortcode(counter: int, salt: str = 'default_salt', length: int = Shortcode.DEFAULT_LENGTH, mult: int = 1315423911) -> str:
    """Generate a short, deterministic URL hash from a counter and salt.

    This function encodes a numeric counter into an n-character Base62 string
    (using A-Z, a-z, 0-9). The counter is salted and wrapped in modulo
    BASE^length to ensure fixed-length output.

    This implementation uses a **multiplicative permutation** over a fixed
    Base62 space to guarantee:
    - 1:1 mapping (bijective)
    - Deterministic output
    - No visible sequential patterns
    - Constant-time execution

    Args:
        counter (int):
            Unique integer value identifying the URL.

        salt (str, optional):
            Secret string used to randomize the output space.
            Defaults to "default_salt".
            Highly recommended to set a custom salt for security.

        length (int, optional):
            Length of the resulting hash.
            Defaults to 7.

        mult (int, optional):
            Multiplicative factor for the permutation.
            Defaults to 1315423911.
            Must be coprime with mod (BASE**length).

    Returns:
        str: A short alphanumeric hash derived from the counter and salt.

    Example:
        >>> generate_shortcode(12345, salt='my_secret', length=7)
        'Gh71WPT'

    NOTE:
        - Codes are unique for every counter below BASE**length. The counter
          wraps around afterwards, and the link registry's insert-if-absent
          check turns the wrap-around into a detected collision.
        - The output is not trivially predictable without knowledge of the salt
          and permutation parameters (this is obfuscation, not encryption).
        - Uses ultra-fast xxhash for hashing the salt.
    """
    if not isinstance(counter, int):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt}).')
    if math.gcd(mult, BASE**length) != 1:
        raise ValueError(f'Multiplicative factor must be coprime with mod ({BASE**length}) (given value: mult={mult}).')

    # Apply an affine (multiplicative + additive) permutation over the fixed
    # modulo space to scramble sequential counters while preserving a 1:1 mapping.
    modulo_space = BASE**length
    salt_hash = xxhash.xxh64_intdigest(salt) % modulo_space
    permuted = (counter * mult + salt_hash) % modulo_space

    # Base62 encoding, most significant digit first, padded to a fixed length
    return ''.join(reversed([ALPHABET[(permuted // BASE**i) % BASE] for i in range(length)])).rjust(length, ALPHABET[0])


def random_shortcode(length: int = Shortcode.DEFAULT_LENGTH) -> str:
    """Generate a random Base62 shortcode.

    Characters are drawn with `secrets.choice`, so consecutive codes are
    independent and unpredictable. Uniqueness is NOT guaranteed: callers must
    detect collisions (see LinkBaseDAO.insert_if_absent()).

    Args:
        length (int, optional):
            Length of the resulting code. Defaults to 7.

    Returns:
        str: random alphanumeric code.

    Example:
        >>> random_shortcode(8)
        'q0ZrT8bA'
    """
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def is_valid_shortcode(code: object) -> bool:
    """Check whether a value is a syntactically valid shortcode.

    Accepts any Base62 string whose length is within the supported bounds, so
    links minted before a change of the configured code length stay resolvable.

    Example:
        >>> is_valid_shortcode('abc1234')
        True
        >>> is_valid_shortcode('abc-123')
        False
    """
    return isinstance(code, str) and SHORTCODE_PATTERN.fullmatch(code) is not None
