"""
Per-scheme options for token verification.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol, Tuple, Union

from shared.config import VerifierSettings
from shared.errors import ConfigurationError


ValidationResult = Union[bool, Tuple[bool, Optional[Dict[str, Any]]]]


class ClaimsValidator(Protocol):
    """Host decision on whether verified claims are allowed in.

    Return ``(valid, credentials)`` (or a bare ``valid`` flag), directly or
    from a coroutine. ``credentials`` replaces the claims as the
    authenticated identity when given. Raising signals an application
    failure rather than a bad token.
    """

    def __call__(
        self, claims: Mapping[str, Any]
    ) -> Union[ValidationResult, Awaitable[ValidationResult]]:
        ...


@dataclass
class VerifyOptions:
    """What a token must satisfy to be accepted."""

    audience: Optional[str] = None
    validate_func: Optional[ClaimsValidator] = None
    issuer: Optional[str] = None
    nonce: Optional[str] = None
    ignore_nonce: bool = False
    cache_duration: Optional[Any] = None
    verify_options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.audience:
            raise ConfigurationError("audience is required!")
        if self.validate_func is None or not callable(self.validate_func):
            raise ConfigurationError("A validate_func is required!")
        if not self.nonce and not self.ignore_nonce:
            raise ConfigurationError("nonce is required or should be explicitly set ignored!")
        if self.nonce and self.ignore_nonce:
            raise ConfigurationError("nonce and ignore_nonce are mutually exclusive")

    @property
    def check_nonce(self) -> bool:
        return not self.ignore_nonce

    @property
    def algorithms(self):
        return self.verify_options.get("algorithms", ["RS256"])

    @classmethod
    def from_settings(cls, settings: VerifierSettings, validate_func: ClaimsValidator) -> "VerifyOptions":
        """Build options from environment-driven settings."""
        return cls(
            audience=settings.audience,
            validate_func=validate_func,
            issuer=settings.issuer,
            nonce=settings.nonce,
            ignore_nonce=settings.ignore_nonce,
            cache_duration=settings.cache_duration_ms,
            verify_options={"algorithms": list(settings.algorithms)},
        )
