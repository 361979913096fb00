"""Expansion configuration."""

from typing import Callable, Final, Optional
from uuid import uuid4

from sqlexpand.exceptions import ImproperConfigurationError

__all__ = ("DEFAULT_MAX_KEY_ATTEMPTS", "ExpansionConfig", "default_key_factory")

DEFAULT_MAX_KEY_ATTEMPTS: Final[int] = 100
SYNTHETIC_SUFFIX_LENGTH: Final[int] = 13


def default_key_factory(name: str) -> str:
    """Build a synthetic key from an array parameter name.

    The suffix is 13 hex characters taken from a random UUID, so the result is
    still a valid placeholder identifier.
    """
    return f"{name}{uuid4().hex[:SYNTHETIC_SUFFIX_LENGTH]}"


class ExpansionConfig:
    """Declarative configuration for placeholder expansion."""

    __slots__ = ("key_factory", "max_key_attempts", "named_marker", "padding", "separator")

    def __init__(
        self,
        named_marker: str = ":",
        separator: str = ", ",
        padding: str = " ",
        key_factory: Optional[Callable[[str], str]] = None,
        max_key_attempts: int = DEFAULT_MAX_KEY_ATTEMPTS,
    ) -> None:
        """Initialize expansion configuration.

        Args:
            named_marker: Prefix written before every synthetic key in the rewritten query
            separator: Text placed between generated placeholders
            padding: Text wrapped around the generated run of placeholders
            key_factory: Callable producing a candidate synthetic key from an array parameter name
            max_key_attempts: How many candidates to draw before giving up on a fresh key

        Raises:
            ImproperConfigurationError: If the marker is empty or ``max_key_attempts`` is below one.
        """
        if not named_marker:
            msg = "named_marker must be a non-empty string"
            raise ImproperConfigurationError(msg)
        if max_key_attempts < 1:
            msg = f"max_key_attempts must be at least 1, got {max_key_attempts}"
            raise ImproperConfigurationError(msg)

        self.named_marker = named_marker
        self.separator = separator
        self.padding = padding
        self.key_factory = key_factory or default_key_factory
        self.max_key_attempts = max_key_attempts

    def hash(self) -> int:
        """Generate a deterministic hash of the settings that affect output text."""
        return hash((self.named_marker, self.separator, self.padding, self.key_factory, self.max_key_attempts))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(named_marker={self.named_marker!r}, separator={self.separator!r}, "
            f"padding={self.padding!r}, key_factory={self.key_factory!r}, max_key_attempts={self.max_key_attempts!r})"
        )
