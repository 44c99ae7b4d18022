"""Password policy.

Production-like deployments require a strong password (length, mixed case,
letters, numbers, symbols) that does not appear in the public breach corpus.
Elsewhere only a minimum length applies.
"""

import hashlib
import re

import httpx
import structlog

from staffdesk.config import settings
from staffdesk.core.constants import MIN_PASSWORD_LENGTH, MIN_STRICT_PASSWORD_LENGTH


logger = structlog.get_logger()

COMPROMISED_MESSAGE = (
    "The given password has appeared in a data leak. Please choose a different password."
)

# Complexity rules for strict mode: (regex pattern, message)
PASSWORD_COMPLEXITY_RULES: list[tuple[str, str]] = [
    (
        r"(?=.*[a-z])(?=.*[A-Z])",
        "The password field must contain at least one uppercase and one lowercase letter.",
    ),
    (r"[^\W\d_]", "The password field must contain at least one letter."),
    (r"[^\w\s]|_", "The password field must contain at least one symbol."),
    (r"\d", "The password field must contain at least one number."),
]


def password_problems(password: str, strict: bool | None = None) -> list[str]:
    """List every way ``password`` breaks the policy.

    Args:
        password: Candidate password
        strict: Force strict/relaxed mode (defaults to ``settings.is_production``)

    Returns:
        Messages in a stable order; empty when the password is acceptable
    """
    if strict is None:
        strict = settings.is_production

    min_length = MIN_STRICT_PASSWORD_LENGTH if strict else MIN_PASSWORD_LENGTH
    problems: list[str] = []
    if len(password) < min_length:
        problems.append(f"The password field must be at least {min_length} characters.")

    if strict:
        problems.extend(
            message
            for pattern, message in PASSWORD_COMPLEXITY_RULES
            if not re.search(pattern, password)
        )
    return problems


def validate_password_policy(password: str, strict: bool | None = None) -> str:
    """Validate a password against the local policy.

    Args:
        password: Candidate password
        strict: Force strict/relaxed mode (defaults to ``settings.is_production``)

    Returns:
        The password unchanged

    Raises:
        ValueError: With the first policy violation
    """
    problems = password_problems(password, strict)
    if problems:
        raise ValueError(problems[0])
    return password


async def is_password_compromised(
    password: str,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Check the password against the breach corpus range API.

    Only the first five characters of the SHA-1 digest leave the process
    (k-anonymity). Network and protocol failures count as "not
    compromised" and are logged.

    Args:
        password: Candidate password
        client: Optional HTTP client to reuse

    Returns:
        True if the corpus lists the password
    """
    digest = hashlib.sha1(password.encode("utf-8")).hexdigest().upper()  # noqa: S324
    prefix, suffix = digest[:5], digest[5:]
    url = f"{settings.password_breach_api_url.rstrip('/')}/{prefix}"

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.password_breach_timeout) as own:
                response = await own.get(url, headers={"Add-Padding": "true"})
        else:
            response = await client.get(url, headers={"Add-Padding": "true"})
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("password_breach_check_unavailable", error=str(exc))
        return False

    for line in response.text.splitlines():
        candidate, _, count = line.strip().partition(":")
        if candidate.upper() == suffix and count.strip() not in ("", "0"):
            return True
    return False
