# storefront/domain/validation.py
import re

from storefront.domain.errors import ValidationError

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

PASSWORD_MIN_LENGTH = 8
PASSWORD_SYMBOLS = "!@#$%^&*()_+-=[]{};:'\",.<>/?\\|`~"

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 30


def _password_rules():
    return [
        (lambda p: len(p) >= PASSWORD_MIN_LENGTH,
         f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"),
        (lambda p: any(c.islower() for c in p),
         "Password must contain a lowercase letter"),
        (lambda p: any(c.isupper() for c in p),
         "Password must contain an uppercase letter"),
        (lambda p: any(c.isdigit() for c in p),
         "Password must contain a digit"),
        (lambda p: any(c in PASSWORD_SYMBOLS for c in p),
         f"Password must contain one of the symbols {PASSWORD_SYMBOLS}"),
    ]


def validate_registration(
    email: str,
    name: str,
    password: str,
    enforce_name_length: bool = True,
) -> None:
    """
    Checks a registration payload; no I/O.

    Raises ValidationError naming the first rule that fails, in the order
    email, password (length, lowercase, uppercase, digit, symbol), name.
    """
    if not email or not EMAIL_RE.fullmatch(email):
        raise ValidationError("Email must look like local@domain.tld")

    password = password or ""
    for check, message in _password_rules():
        if not check(password):
            raise ValidationError(message)

    if enforce_name_length:
        length = len((name or "").strip())
        if not NAME_MIN_LENGTH <= length <= NAME_MAX_LENGTH:
            raise ValidationError(
                f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
