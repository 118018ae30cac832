"""Time-based one-time passwords, generated with pyotp."""

from __future__ import annotations

import binascii
from datetime import datetime, timezone

import pyotp

from zvault.errors import TotpSecretError

PERIOD = 30
DIGITS = 6


def normalize_secret(secret: str) -> str:
    """Strip whitespace and uppercase; raise TotpSecretError unless it is base32."""
    s = "".join(secret.split()).upper()
    try:
        pyotp.TOTP(s).byte_secret()
    except (binascii.Error, ValueError) as e:
        raise TotpSecretError(f"decode totp secret: {e}") from e
    return s


def hotp(secret: str, counter: int) -> str:
    return pyotp.HOTP(normalize_secret(secret), digits=DIGITS).at(counter)


def generate(secret: str, unix_time: float) -> tuple[str, int]:
    """Return (code, seconds remaining in the current period)."""
    otp = pyotp.TOTP(normalize_secret(secret), digits=DIGITS, interval=PERIOD)
    t = int(unix_time)
    code = otp.at(datetime.fromtimestamp(t, tz=timezone.utc))
    return code, PERIOD - t % PERIOD
