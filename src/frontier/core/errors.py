"""Error types shared by the Infinite Frontier services.

Every failure that crosses a component boundary is a :class:`ServiceError`.
Instead of one subclass per remote service, the error carries a ``kind`` tag
and a common shape so callers have a single surface to check:

===============  ===============================  ==================
kind             raised by                        status
===============  ===============================  ==================
``generation``   Venice AI image client           HTTP status
``marketplace``  OpenSea read proxy               HTTP status, 0 for
                                                  transport failures
``validation``   prompt / image / input checks    always ``None``
===============  ===============================  ==================

Validation errors never reach the network, so they carry a machine code
(``EMPTY_PROMPT`` ...) but no status.

Contract reverts are modelled separately by
:class:`frontier.chain.contract.ContractRevert`, because they are named
conditions raised by the contract itself rather than by this service.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Tag identifying which service produced a :class:`ServiceError`."""

    GENERATION = "generation"
    MARKETPLACE = "marketplace"
    VALIDATION = "validation"


class ServiceError(Exception):
    """Tagged error with a human message and optional status and code.

    Attributes:
        kind: The :class:`ErrorKind` of the failing service.
        message: Human-readable description, safe to show to end users.
        status: HTTP status of the failed remote call, if any.
        code: Machine-readable error code, if any.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message
        self.status = status
        self.code = code

    @classmethod
    def generation(cls, message: str, status: int, code: str = "UNKNOWN_ERROR") -> ServiceError:
        """Build an image-generation error."""
        return cls(ErrorKind.GENERATION, message, status=status, code=code)

    @classmethod
    def marketplace(cls, message: str, status: int) -> ServiceError:
        """Build a marketplace error."""
        return cls(ErrorKind.MARKETPLACE, message, status=status)

    @classmethod
    def validation(cls, message: str, code: str) -> ServiceError:
        """Build a validation error (no status, it never reached the network)."""
        return cls(ErrorKind.VALIDATION, message, code=code)

    def to_dict(self) -> dict:
        """Serialise the error for JSON responses."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "status": self.status,
            "code": self.code,
        }

    def __repr__(self) -> str:
        return (
            f"ServiceError(kind={self.kind.value!r}, message={self.message!r}, "
            f"status={self.status!r}, code={self.code!r})"
        )
