"""
Local form validation.

Every check raises ValidationError and runs before any network call.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

from lokalfinds.core.config import settings
from lokalfinds.core.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Letters (any script), spaces, apostrophes, hyphens and periods
NAME_PATTERN = re.compile(r"^[^\W\d_]+(?:[ '\-.][^\W\d_]*)*$")

FILL_ALL_FIELDS = "Please fill in all fields"
INVALID_PRICE = "Please enter a valid price"
# Largest value a Numeric(10, 2) price column holds
MAX_PRICE = Decimal("99999999.99")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def require_fields(message: str = FILL_ALL_FIELDS, **fields: Optional[str]) -> None:
    """Raise for the first empty field."""
    for name, value in fields.items():
        if _is_blank(value):
            raise ValidationError(message, field=name)


def validate_email(email: Optional[str]) -> str:
    if _is_blank(email):
        raise ValidationError("Please enter your email address", field="email")
    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address", field="email")
    return email


def validate_password(password: Optional[str], confirm_password: Optional[str] = None) -> str:
    if _is_blank(password):
        raise ValidationError(FILL_ALL_FIELDS, field="password")
    if confirm_password is not None and password != confirm_password:
        raise ValidationError("Passwords do not match", field="confirm_password")
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
            field="password",
        )
    return password


def validate_name(value: Optional[str], field: str) -> str:
    label = field.replace("_", " ")
    if _is_blank(value):
        raise ValidationError(f"{label.capitalize()} cannot be empty", field=field)
    value = value.strip()
    if not NAME_PATTERN.match(value):
        raise ValidationError(f"{label.capitalize()} contains invalid characters", field=field)
    return value


def validate_login(email: Optional[str], password: Optional[str]) -> str:
    require_fields(email=email, password=password)
    return validate_email(email)


def validate_signup(
    email: Optional[str],
    password: Optional[str],
    first_name: Optional[str],
    last_name: Optional[str],
    confirm_password: Optional[str] = None,
    accepted_terms: bool = True,
) -> tuple[str, str, str]:
    """
    Validate the signup form.

    Returns:
        Tuple of (email, first_name, last_name), trimmed
    """
    require_fields(email=email, password=password, first_name=first_name, last_name=last_name)
    email = validate_email(email)
    validate_password(password, confirm_password)
    first_name = validate_name(first_name, "first_name")
    last_name = validate_name(last_name, "last_name")
    if not accepted_terms:
        raise ValidationError(
            "Please accept the Terms of Service and Privacy Policy", field="accepted_terms"
        )
    return email, first_name, last_name


def validate_rating(rating: Optional[int]) -> int:
    if not rating:
        raise ValidationError("Please select a rating", field="rating")
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5", field="rating")
    return rating


def parse_price(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """Parse a price as entered in a form; two fraction digits, never negative."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(FILL_ALL_FIELDS, field="price")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(INVALID_PRICE, field="price")
    if not price.is_finite() or price < 0 or price > MAX_PRICE:
        raise ValidationError(INVALID_PRICE, field="price")
    rounded = price.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if rounded > MAX_PRICE:
        raise ValidationError(INVALID_PRICE, field="price")
    return rounded
