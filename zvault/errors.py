"""Exception hierarchy shared by stores, controllers and the runtime."""


class ZvaultError(Exception):
    """Base class for all zvault errors."""


class ValidationError(ZvaultError):
    """User input rejected before any store call."""


class DateFormatError(ValidationError):
    """Due-date text did not match the relative-date grammar."""


class TotpSecretError(ValidationError):
    """One-time-password seed is not valid base32."""


class NotFoundError(ZvaultError):
    """Record no longer exists in the store."""


class StoreError(ZvaultError):
    """I/O, encoding or crypto failure inside a store."""


class AuthenticationError(StoreError):
    """Vault password was rejected."""


class ClipboardError(ZvaultError):
    """System clipboard could not be written."""
