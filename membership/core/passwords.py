"""Password strength policy shared by sign-up, password changes and the admin seed setting."""

import re

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[^A-Za-z0-9]")


def password_policy_violation(password: str) -> str | None:
    """
    Return a human-readable reason when password breaks the policy, else None.

    One rule for register, reset and change: 8-128 chars with upper, lower,
    digit and special character.
    """
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        return f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters long."
    if not (
        _UPPER.search(password)
        and _LOWER.search(password)
        and _DIGIT.search(password)
        and _SPECIAL.search(password)
    ):
        return "Password must contain uppercase, lowercase, number, and special character."
    return None
