"""Custom exceptions for diffsage."""

from __future__ import annotations

from enum import Enum


class DiffSageError(Exception):
    """Base exception for all diffsage errors."""


class ConfigError(DiffSageError):
    """Configuration-related errors."""


class GitError(DiffSageError):
    """Git invocation errors."""


class LLMError(DiffSageError):
    """LLM provider errors."""


class ProviderNotAvailableError(LLMError):
    """Raised when an LLM provider's SDK is not installed."""

    def __init__(self, provider: str, package: str):
        super().__init__(
            f"Provider '{provider}' requires the '{package}' package. "
            f"Install it with: pip install diffsage[{provider}]"
        )


class ErrorKind(str, Enum):
    """Structured kind of a provider failure."""

    OVERSIZE_REQUEST = "oversize_request"
    RATE_LIMITED = "rate_limited"
    AUTHENTICATION = "authentication"
    OTHER = "other"


class TransportError(LLMError):
    """A provider call failed. The body text is kept verbatim."""

    def __init__(
        self,
        body: str,
        status_code: int | None = None,
        kind: ErrorKind = ErrorKind.OTHER,
    ):
        self.body = body
        self.status_code = status_code
        self.kind = kind
        prefix = f"HTTP {status_code}: " if status_code is not None else ""
        super().__init__(f"{prefix}{body}")


class SizeRejectionError(TransportError):
    """The provider rejected the request for exceeding its context window."""

    def __init__(self, body: str, status_code: int | None = None):
        super().__init__(body, status_code=status_code, kind=ErrorKind.OVERSIZE_REQUEST)


class EmptyResponseError(LLMError):
    """The provider reported success but returned no completion."""


class AnalysisError(DiffSageError):
    """Terminal failure of an analysis run."""

    def __init__(self, message: str, model: str = "", cause: Exception | None = None):
        super().__init__(message)
        self.model = model
        self.cause = cause
