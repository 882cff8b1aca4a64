"""Failures raised by the account, one-time code and contact services."""

from __future__ import annotations


class AccountError(Exception):
    """Base class for every failure the services report to the API layer."""


class EmailAlreadyRegisteredError(AccountError):
    def __init__(self, email: str) -> None:
        super().__init__(f"Email already registered: {email}")
        self.email = email


class AccountNotFoundError(AccountError):
    def __init__(self, email: str) -> None:
        super().__init__(f"No account for {email}")
        self.email = email


class InvalidCredentialsError(AccountError):
    """Unknown email or wrong password; callers must not tell the two apart."""


class OtpThrottledError(AccountError):
    """A code was issued too recently; ``retry_after`` is in whole seconds."""

    def __init__(self, retry_after: int) -> None:
        super().__init__(f"Please wait {retry_after} seconds before requesting a new code")
        self.retry_after = retry_after


class InvalidOtpError(AccountError):
    pass


class OtpExpiredError(AccountError):
    pass


class UpstreamError(AccountError):
    """The database or the mail transport failed."""


class NotificationError(UpstreamError):
    pass
