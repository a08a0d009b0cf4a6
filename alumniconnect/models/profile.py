"""Profile model and role definitions."""

import enum
import logging

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from alumniconnect.database import Base

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    """Closed set of roles; ANONYMOUS stands for "no signed-in user"."""
    STUDENT = "student"
    ALUMNI = "alumni"
    ADMIN = "admin"
    ANONYMOUS = "anonymous"


ACCOUNT_ROLES = (Role.STUDENT, Role.ALUMNI, Role.ADMIN)


def parse_role(value) -> Role | None:
    if isinstance(value, Role):
        return value if value in ACCOUNT_ROLES else None
    if not isinstance(value, str):
        return None
    try:
        role = Role(value.strip().lower())
    except ValueError:
        logger.warning("Unrecognized role %r", value)
        return None
    return role if role in ACCOUNT_ROLES else None


class Profile(Base):
    """Application profile for an identity-service account."""
    __tablename__ = "profiles"

    id = Column(String, primary_key=True, index=True)  # identity user id
    email = Column(String, unique=True, index=True)
    full_name = Column(String)
    role = Column(String)  # student/alumni/admin
    department = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
