"""
Input validation functions for EdPsych Connect.

All validation functions follow the pattern:
1. Accept raw user input
2. Normalize/clean the input
3. Validate against business rules
4. Return cleaned value or raise ValidationError

ValidationError subclasses ValueError so the same helpers can be called from
Pydantic field validators (surfacing as 422) and from service code.
"""

import re
from urllib.parse import urlparse

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
LOOPBACK_HOSTS = ("localhost", "127.0.0.1")


class ValidationError(ValueError):
    """Raised when user input fails validation."""

    pass


# ============================================================================
# Email Validation
# ============================================================================


def validate_email(email: str | None) -> str:
    """
    Validate and normalize an email address.

    Emails are login identifiers, so they are stored lower-cased.

    Raises:
        ValidationError: If the address is empty or malformed
    """
    if email is None or email.strip() == "":
        raise ValidationError("Email cannot be empty")

    cleaned = email.strip().lower()

    if len(cleaned) > 255:
        raise ValidationError("Email cannot exceed 255 characters")

    if not EMAIL_PATTERN.match(cleaned):
        raise ValidationError("Invalid email address")

    return cleaned


# ============================================================================
# URL Validation
# ============================================================================


def validate_file_url(url: str | None) -> str:
    """
    Validate an uploaded-evidence URL.

    Only absolute http(s) URLs are accepted.

    Raises:
        ValidationError: If the URL is empty, relative or uses another scheme
    """
    if url is None or url.strip() == "":
        raise ValidationError("File URL cannot be empty")

    cleaned = url.strip()
    parsed = urlparse(cleaned)

    if parsed.scheme not in ("http", "https"):
        raise ValidationError("File URL must use http or https")

    if not parsed.netloc:
        raise ValidationError("File URL must be absolute")

    return cleaned


def validate_redirect_uri(uri: str | None) -> str:
    """
    Validate an OAuth redirect URI.

    Accepts https URIs anywhere, and http only for local development hosts.

    Raises:
        ValidationError: If the URI is not allowed
    """
    if uri is None or uri.strip() == "":
        raise ValidationError("Redirect URI cannot be empty")

    cleaned = uri.strip()
    parsed = urlparse(cleaned)

    if not parsed.netloc:
        raise ValidationError(f"Invalid redirect URI: {cleaned}")

    if parsed.scheme == "https":
        return cleaned

    if parsed.scheme == "http" and parsed.hostname in LOOPBACK_HOSTS:
        return cleaned

    raise ValidationError(f"Redirect URI must use HTTPS (or localhost for development): {cleaned}")


# ============================================================================
# Answer Normalisation
# ============================================================================


def normalize_answer(answer: str | None, *, case_sensitive: bool = False) -> str:
    """
    Normalize a free-text answer for comparison.

    Collapses runs of whitespace, strips the ends and lower-cases unless
    the question is case sensitive.
    """
    if answer is None:
        return ""

    cleaned = re.sub(r"\s+", " ", str(answer)).strip()
    return cleaned if case_sensitive else cleaned.lower()
