"""
Exchange Error Taxonomy

Every failure the engine can report is an ExchangeError with a stable
machine-readable code. Adapters (REST, CLI) map codes to their own status
conventions; the core never knows about HTTP.
"""

from typing import Optional


class ExchangeError(Exception):
    """Base class for all engine errors."""

    code = "EXCHANGE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(ExchangeError):
    """Malformed or out-of-range input, attributed to a single field."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class VerificationRequired(ExchangeError):
    """User has not completed mobile verification or KYC approval."""

    code = "VERIFICATION_REQUIRED"


class AccountNotConfigured(ExchangeError):
    """User is missing the receiving details for the settlement leg."""

    code = "ACCOUNT_NOT_CONFIGURED"

    def __init__(self, setting: str, message: Optional[str] = None):
        super().__init__(message or f"{setting} must be configured before trading")
        self.setting = setting

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.setting
        return data


class MissingProof(ExchangeError):
    """No proof-of-payment was attached to the submission."""

    code = "MISSING_PROOF"

    def __init__(self, message: str = "Proof of payment is required"):
        super().__init__(message)


class NotFound(ExchangeError):
    code = "NOT_FOUND"


class AlreadyApproved(ExchangeError):
    """Approval guard: a transaction is approved at most once."""

    code = "ALREADY_APPROVED"


class PersistenceFailure(ExchangeError):
    """Storage-layer fault. Details are logged, never shown to callers."""

    code = "PERSISTENCE_FAILURE"
