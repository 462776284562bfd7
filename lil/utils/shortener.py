"""Shortcode generation and validation utility

This module provides the generator used for new short links as well as the
validation rules applied to caller-supplied (custom) shortcodes and target URLs.

Classes:
    ShortcodeGenerator:
        Generate random fixed-length shortcodes and validate custom ones.

Functions:
    validate_target_url(url) -> str:
        Ensure a target URL is a non-empty absolute http(s) URL.

Example:
    >>> from lil.utils import ShortcodeGenerator
    >>> generator = ShortcodeGenerator(length=8)
    >>> generator.generate()
    'Xk7mQp2z'
    >>> generator.validate('abc12345')
    True
"""

import secrets
from urllib.parse import urlsplit

from lil.constants import Shortcode
from lil.exceptions import InvalidShortcodeError, InvalidTargetURLError


ALLOWED_URL_SCHEMES = frozenset({'http', 'https'})


class ShortcodeGenerator:
    """Generate and validate fixed-length shortcodes.

    Generation is stateless and gives no uniqueness guarantee: uniqueness is
    enforced by the data store's check-and-set at insertion time, and callers
    are expected to retry with a fresh code on collision.

    Attributes:
        length (int):
            Number of characters in every shortcode.
        alphabet (str):
            Characters drawn from when generating codes.
        valid_chars (frozenset[str]):
            Characters accepted in custom codes.
        reserved (frozenset[str]):
            Path segments that can never be used as shortcodes.
    """

    def __init__(
        self,
        length: int = Shortcode.DEFAULT_LENGTH,
        alphabet: str = Shortcode.ALPHABET,
        valid_chars: str = Shortcode.VALID_CHARS,
        reserved: frozenset[str] = Shortcode.RESERVED,
    ):
        if not isinstance(length, int) or length < 1:
            raise ValueError(f'Shortcode length must be a positive integer (given value: {length}).')
        if not alphabet:
            raise ValueError('Shortcode alphabet must be a non-empty string.')
        if not set(alphabet) <= set(valid_chars):
            raise ValueError('Every alphabet character must be a valid shortcode character.')

        self.length = length
        self.alphabet = alphabet
        self.valid_chars = frozenset(valid_chars)
        self.reserved = frozenset(reserved)

    def generate(self) -> str:
        """Generate a random shortcode.

        Returns:
            str: `length` characters drawn from `alphabet` using a CSPRNG.

        NOTE:
            - With the default 56 character alphabet and a length of 8 there
              are ~9.7e13 codes, so collisions are rare but must still be handled.
        """
        while True:
            shortcode = ''.join(secrets.choice(self.alphabet) for _ in range(self.length))
            if shortcode not in self.reserved:
                return shortcode

    def validate(self, candidate: str) -> bool:
        """Validate a caller-supplied shortcode

        Args:
            candidate (str):
                Custom shortcode requested by the caller.

        Returns:
            bool: True if the candidate is a valid shortcode.

        Raises:
            InvalidShortcodeError:
                If the candidate is empty, has the wrong length, contains
                characters outside the alphabet or is a reserved path segment.

        Example:
            >>> ShortcodeGenerator(length=8).validate('abc12345')
            True
            >>> ShortcodeGenerator(length=8).validate('abc')
            InvalidShortcodeError: Shortcode must be exactly 8 characters long (given length: 3).
        """
        if not isinstance(candidate, str) or not candidate:
            raise InvalidShortcodeError('Shortcode must be a non-empty string.')
        if len(candidate) != self.length:
            raise InvalidShortcodeError(f'Shortcode must be exactly {self.length} characters long (given length: {len(candidate)}).')
        invalid = sorted(set(candidate) - self.valid_chars)
        if invalid:
            raise InvalidShortcodeError(f'Shortcode contains invalid characters: {"".join(invalid)!r}.')
        if candidate in self.reserved:
            raise InvalidShortcodeError(f'Shortcode {candidate!r} is reserved.')
        return True

    def is_valid(self, candidate: str) -> bool:
        """Non-raising variant of validate() for the redirect path."""
        try:
            return self.validate(candidate)
        except InvalidShortcodeError:
            return False


def validate_target_url(url: str) -> str:
    """Ensure a target URL is an absolute http(s) URL

    Args:
        url (str): destination URL requested by the caller.

    Returns:
        str: the URL with surrounding whitespace removed.

    Raises:
        InvalidTargetURLError:
            If the URL is empty, relative or uses an unsupported scheme.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidTargetURLError('Target URL must be a non-empty string.')

    url = url.strip()
    try:
        components = urlsplit(url)
    except ValueError as e:
        raise InvalidTargetURLError(f'Target URL {url!r} is malformed.') from e

    if components.scheme.lower() not in ALLOWED_URL_SCHEMES or not components.netloc:
        raise InvalidTargetURLError(f'Target URL {url!r} must be an absolute http(s) URL.')
    return url
