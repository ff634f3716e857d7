from enum import Enum
from typing import Optional


class ProviderErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UNAUTHORIZED = "upstream_unauthorized"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_FAILURE = "upstream_failure"


class OTPProviderError(Exception):
    """Base class for failures reported by, or while talking to, the OTP provider.

    Each subclass is one tag of the provider outcome; a successful call simply
    returns its value instead of raising.
    """
    kind: ProviderErrorKind = ProviderErrorKind.UPSTREAM_FAILURE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(OTPProviderError):
    kind = ProviderErrorKind.INVALID_INPUT

    def __init__(self, message: str = "invalid input body"):
        super().__init__(message)


class UnauthorizedError(OTPProviderError):
    kind = ProviderErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "invalid credentials"):
        super().__init__(message)


class RateLimitedError(OTPProviderError):
    kind = ProviderErrorKind.RATE_LIMITED

    def __init__(self, message: str = "rate limited"):
        super().__init__(message)


class UpstreamError(OTPProviderError):
    kind = ProviderErrorKind.UPSTREAM_FAILURE

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CodeRejectedError(Exception):
    """The provider answered the check, but the code did not match."""

    def __init__(self, message: str = "invalid code"):
        super().__init__(message)
        self.message = message


class IdentityProviderError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
