"""Form checks that run before any call to the identity service."""

from alumniconnect.models.profile import parse_role

MIN_PASSWORD_LENGTH = 6

FILL_ALL_FIELDS = 'Please fill in all fields'
FILL_REQUIRED_FIELDS = 'Please fill in all required fields'
INVALID_ROLE = 'Please select a valid role'
PASSWORD_TOO_SHORT = f'Password must be at least {MIN_PASSWORD_LENGTH} characters long'
PASSWORDS_DO_NOT_MATCH = 'Passwords do not match'
EMAIL_REQUIRED = 'Please enter your email address'


def validate_sign_in(email: str, password: str) -> str | None:
    if not email or not password:
        return FILL_ALL_FIELDS
    return None


def validate_sign_up(
    email: str,
    password: str,
    confirm_password: str,
    full_name: str,
    role: str,
) -> str | None:
    if not email or not password or not full_name or not role:
        return FILL_REQUIRED_FIELDS
    if parse_role(role) is None:
        return INVALID_ROLE
    if len(password) < MIN_PASSWORD_LENGTH:
        return PASSWORD_TOO_SHORT
    if password != confirm_password:
        return PASSWORDS_DO_NOT_MATCH
    return None


def validate_forgot_password(email: str) -> str | None:
    if not email:
        return EMAIL_REQUIRED
    return None


def validate_new_password(password: str, confirm_password: str) -> str | None:
    if not password or not confirm_password:
        return FILL_ALL_FIELDS
    if len(password) < MIN_PASSWORD_LENGTH:
        return PASSWORD_TOO_SHORT
    if password != confirm_password:
        return PASSWORDS_DO_NOT_MATCH
    return None
