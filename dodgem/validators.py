"""Validation helpers for user input.

Each validator returns an error message, or None when the value is valid,
so they plug straight into ``prompt_for_input(validate=...)``.
"""

import re

EMAIL_ADDRESS = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD = re.compile(r"^\S.{0,127}$")


def validate_email(value: str) -> str | None:
    if not EMAIL_ADDRESS.match(value.strip()):
        return "Please enter a valid email address"
    return None


def validate_password(value: str) -> str | None:
    if not PASSWORD.match(value):
        return "Please enter a valid password"
    return None
