"""Auth session provider.

``AuthSessionProvider`` is the only writer of the current user for a client
session. Everything else reads the immutable ``SessionContext`` it exposes.
"""
import logging
from typing import Any

import jwt
from fastapi import status
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session as DbSession
from starlette.concurrency import run_in_threadpool

from alumniconnect.auth import jwt_handler
from alumniconnect.auth.identity_client import AuthResult, IdentityClient, IdentityError
from alumniconnect.auth.validation import MIN_PASSWORD_LENGTH, PASSWORD_TOO_SHORT
from alumniconnect.core import config
from alumniconnect.models.profile import Profile, parse_role
from alumniconnect.schemas.auth import ProfileFields, Session, SessionContext, User

logger = logging.getLogger(__name__)

ACCOUNT_CREATION_FAILED = 'Failed to create account'
EMAIL_ALREADY_REGISTERED = 'User already registered'
DATABASE_UNAVAILABLE = 'Database unavailable. Verify DATABASE_URL and try again.'
SESSION_MISSING = 'Auth session missing!'


class AuthSessionProvider:
    def __init__(self, identity: IdentityClient, db: DbSession | None = None):
        self.identity = identity
        self.db = db
        self._context = SessionContext(loading=True)

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def current_user(self) -> User | None:
        return self._context.user

    def _load_profile(self, user_id: str) -> Profile | None:
        if self.db is None or not user_id:
            return None
        try:
            return self.db.get(Profile, user_id)
        except SQLAlchemyError:
            logger.exception('Profile lookup failed for user %s', user_id)
            return None

    def build_user(self, user_id: str | None, email: str | None, metadata: dict[str, Any] | None) -> User | None:
        if not user_id:
            return None
        metadata = metadata or {}
        profile = self._load_profile(user_id)
        if profile is not None:
            return User(
                id=user_id,
                email=profile.email or email or '',
                full_name=profile.full_name,
                role=parse_role(profile.role),
                department=profile.department,
            )
        return User(
            id=user_id,
            email=email or '',
            full_name=metadata.get('full_name'),
            role=parse_role(metadata.get('role')),
            department=metadata.get('department'),
        )

    def _user_from_identity(self, identity_user: dict[str, Any] | None) -> User | None:
        if not identity_user:
            return None
        return self.build_user(
            identity_user.get('id'),
            identity_user.get('email'),
            identity_user.get('user_metadata'),
        )

    def _set_context(self, user: User | None, session: Session | None) -> None:
        self._context = SessionContext(user=user, session=session if user else None, loading=False)

    def bootstrap(self, access_token: str | None, refresh_token: str | None = None) -> SessionContext:
        """Resolve the signed-in user from a stored access token, without a network call."""
        self._context = SessionContext(loading=True)
        user = None
        if access_token:
            try:
                claims = jwt_handler.decode_access_token(access_token)
            except jwt.PyJWTError:
                logger.info('Discarding invalid or expired access token')
                claims = {}
            user = self.build_user(claims.get('sub'), claims.get('email'), claims.get('user_metadata'))
        session = Session(access_token=access_token, refresh_token=refresh_token or '') if user else None
        self._set_context(user, session)
        return self._context

    async def sign_in(self, email: str, password: str) -> AuthResult:
        result = await self.identity.sign_in_with_password(email, password)
        if result.ok:
            user = await run_in_threadpool(self._user_from_identity, result.user)
            self._set_context(user, result.session)
        return result

    def _check_email_available(self, email: str) -> IdentityError | None:
        try:
            existing = self.db.query(Profile).filter(Profile.email == email).first()
        except OperationalError:
            logger.exception('Profile lookup failed for %s', email)
            return IdentityError(DATABASE_UNAVAILABLE, status.HTTP_503_SERVICE_UNAVAILABLE)
        if existing is not None:
            return IdentityError(EMAIL_ALREADY_REGISTERED, status.HTTP_409_CONFLICT)
        return None

    def _save_profile(self, user_id: str, email: str, profile_fields: ProfileFields) -> IdentityError | None:
        # Keyed on the identity user id, so a stale row for the same account is overwritten.
        try:
            self.db.merge(Profile(
                id=user_id,
                email=email,
                full_name=profile_fields.full_name,
                role=profile_fields.role.value,
                department=profile_fields.department,
            ))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning('Profile for %s conflicts with an existing row', email)
            return IdentityError(ACCOUNT_CREATION_FAILED, status.HTTP_409_CONFLICT)
        except OperationalError:
            self.db.rollback()
            logger.exception('Profile creation failed for %s', email)
            return IdentityError(DATABASE_UNAVAILABLE, status.HTTP_503_SERVICE_UNAVAILABLE)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return None

    async def sign_up(self, email: str, password: str, profile_fields: ProfileFields) -> AuthResult:
        """Create the identity account and its profile row.

        Profile conflicts and store outages are detected before the account is
        created upstream. A write that still fails afterwards leaves the
        identity account in place; its metadata carries the same profile
        fields, so ``build_user`` keeps resolving the role for it.
        """
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(error=IdentityError(PASSWORD_TOO_SHORT))

        if self.db is not None:
            error = await run_in_threadpool(self._check_email_available, email)
            if error is not None:
                return AuthResult(error=error)

        result = await self.identity.sign_up(
            email,
            password,
            {
                'role': profile_fields.role.value,
                'full_name': profile_fields.full_name,
                'department': profile_fields.department,
            },
            redirect_to=config.FRONTEND_URL,
        )
        if not result.ok or self.db is None:
            return result

        user_id = (result.user or {}).get('id')
        if not user_id:
            return AuthResult(error=IdentityError(ACCOUNT_CREATION_FAILED))

        error = await run_in_threadpool(self._save_profile, user_id, email, profile_fields)
        if error is not None:
            return AuthResult(error=error)
        return result

    async def sign_out(self) -> AuthResult:
        session = self._context.session
        self._set_context(None, None)
        if session is None or not session.access_token:
            return AuthResult()
        result = await self.identity.sign_out(session.access_token)
        if not result.ok:
            logger.warning('Identity service sign-out failed: %s', result.error.message)
        return AuthResult()

    async def reset_password(self, email: str) -> AuthResult:
        return await self.identity.reset_password_for_email(email, config.PASSWORD_RESET_REDIRECT_URL)

    async def establish_session(self, access_token: str, refresh_token: str) -> AuthResult:
        result = await self.identity.set_session(access_token, refresh_token)
        if result.ok:
            user = await run_in_threadpool(self._user_from_identity, result.user)
            self._set_context(user, result.session)
        return result

    async def update_password(self, new_password: str) -> AuthResult:
        session = self._context.session
        if session is None:
            return AuthResult(error=IdentityError(SESSION_MISSING))
        return await self.identity.update_user(session.access_token, {'password': new_password})
