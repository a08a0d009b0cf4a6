"""Role-based navigation.

Navigation targets and menu entries are a pure function of the signed-in user
and their role. Unknown or missing roles resolve to ``Role.ANONYMOUS`` and
produce no navigation.
"""
import logging

from pydantic import BaseModel

from alumniconnect.models.profile import ACCOUNT_ROLES, Role
from alumniconnect.schemas.auth import User

logger = logging.getLogger(__name__)

DASHBOARD_ROUTES: dict[Role, str | None] = {
    Role.STUDENT: '/student-dashboard',
    Role.ALUMNI: '/alumni-dashboard',
    Role.ADMIN: '/admin-dashboard',
    Role.ANONYMOUS: None,
}

PROFILE_ROUTES: dict[Role, str | None] = {
    Role.STUDENT: '/student-profile',
    Role.ALUMNI: '/alumni-profile',
    Role.ADMIN: None,
    Role.ANONYMOUS: None,
}

HOME_ROUTE = '/'


class MenuItem(BaseModel):
    key: str
    label: str
    target: str | None = None


class Menu(BaseModel):
    role: Role
    display_name: str | None = None
    initials: str | None = None
    email: str | None = None
    items: list[MenuItem]


def resolve_role(user: User | None) -> Role:
    if user is None:
        return Role.ANONYMOUS
    if user.role not in ACCOUNT_ROLES:
        logger.info('No usable role for user %s: %r', user.id, user.role)
        return Role.ANONYMOUS
    return user.role


def dashboard_route(user: User | None) -> str | None:
    role = resolve_role(user)
    target = DASHBOARD_ROUTES[role]
    if target is None:
        logger.info('No dashboard available for role %s, not navigating', role.value)
    return target


def profile_route(user: User | None) -> str | None:
    return PROFILE_ROUTES[resolve_role(user)]


def user_initials(user: User) -> str:
    if user.full_name and user.full_name.strip():
        return ''.join(part[0] for part in user.full_name.split()).upper()[:2]
    if user.email:
        return user.email[0].upper()
    return 'U'


def build_menu(user: User | None) -> Menu:
    role = resolve_role(user)
    if user is None:
        return Menu(
            role=role,
            items=[
                MenuItem(key='sign-in', label='Sign In'),
                MenuItem(key='sign-up', label='Sign Up'),
            ],
        )

    items = [MenuItem(key='dashboard', label='Dashboard', target=DASHBOARD_ROUTES[role])]
    if PROFILE_ROUTES[role]:
        items.append(MenuItem(key='profile', label='My Profile', target=PROFILE_ROUTES[role]))
    items.append(MenuItem(key='sign-out', label='Sign Out', target=HOME_ROUTE))

    return Menu(
        role=role,
        display_name=user.full_name or user.email,
        initials=user_initials(user),
        email=user.email,
        items=items,
    )
