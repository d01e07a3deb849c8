from __future__ import annotations
import re
from typing import Optional

from app.errors import ErrorKind, ForecastError

# 5-digit ZIP with optional +4, anywhere in free text. ASCII digits only.
ZIP_SEARCH_RE = re.compile(r"\b\d{5}(?:-\d{4})?\b", re.ASCII)
ZIP_FULL_RE = re.compile(r"^\d{5}(-\d{4})?$", re.ASCII)


def require_address(address: Optional[str]) -> str:
    """
    Returns the stripped address.
    Raises ForecastError(MISSING_ADDRESS) if it is missing or blank.
    """
    if address is None or not address.strip():
        raise ForecastError(ErrorKind.MISSING_ADDRESS)
    return address.strip()


def extract_zip(address: Optional[str]) -> Optional[str]:
    # First ZIP-looking substring, verbatim (keeps the -XXXX suffix), or None.
    m = ZIP_SEARCH_RE.search(address or "")
    return m.group(0) if m else None


def is_valid_zip(candidate: Optional[str]) -> bool:
    if candidate is None:
        return False
    # fullmatch, because "$" alone would let a trailing newline through
    return ZIP_FULL_RE.fullmatch(candidate) is not None


def zip_from_address(address: str) -> str:
    """
    Extract then validate. Raises ForecastError(INVALID_ZIP_CODE) when the
    address has no usable ZIP.
    """
    zip_code = extract_zip(address)
    if not is_valid_zip(zip_code):
        raise ForecastError(ErrorKind.INVALID_ZIP_CODE, f"No valid ZIP code in {address!r}")
    return zip_code
