"""Input checks shared by the client (pre-submit) and the backend."""

from ..exceptions import ValidationError

MIN_PASSWORD_LENGTH = 8
# Largest value an SQLite INTEGER column holds
MAX_PRICE_CENTS = 2**63 - 1
SEAT_FIELDS = ("level", "seat_section", "seat_row", "seat_number")


def validate_school_email(email: str, domain: str = "msu.edu") -> None:
    """Check that an email address belongs to the institutional domain.

    Args:
        email: Address to check
        domain: Required domain suffix, e.g. ``msu.edu``

    Raises:
        ValidationError: If the address is malformed or outside the domain
    """
    if not email or email.count("@") != 1:
        raise ValidationError("Invalid email format")

    local_part, email_domain = email.split("@")
    if not local_part or not email_domain:
        raise ValidationError("Invalid email format")

    email_domain = email_domain.lower()
    domain = domain.lower()
    # Subdomains such as cse.msu.edu are accepted, lookalikes such as notmsu.edu are not
    if email_domain != domain and not email_domain.endswith(f".{domain}"):
        raise ValidationError(f"Email must be an institutional email (must end with {domain})")


def validate_password(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def validate_seat_details(**fields: str) -> None:
    """Reject listings with blank seat attributes."""
    missing = [name for name in SEAT_FIELDS if not (fields.get(name) or "").strip()]
    if missing:
        raise ValidationError(f"Seat details cannot be empty: {', '.join(missing)}")


def validate_price_cents(price: int) -> None:
    if isinstance(price, bool) or not isinstance(price, int):
        raise ValidationError("Price must be an integer number of cents")
    if price < 0:
        raise ValidationError("Price must be >= 0")
    if price > MAX_PRICE_CENTS:
        raise ValidationError(f"Price must be <= {MAX_PRICE_CENTS} cents")
