import os
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')

from alumniconnect.auth.identity_client import AuthResult  # noqa: E402
from alumniconnect.core import config  # noqa: E402
from alumniconnect.database import Base  # noqa: E402
from alumniconnect.models.profile import Profile  # noqa: E402
from alumniconnect.schemas.auth import Session  # noqa: E402

TEST_JWT_SECRET = 'test-identity-secret-0123456789abcdef'


class FakeIdentity:
    """Stands in for IdentityClient; records calls and replays canned results."""

    def __init__(self):
        self.calls = []
        self.results = {}

    def respond(self, method: str, result: AuthResult) -> None:
        self.results[method] = result

    def called(self, method: str) -> list:
        return [args for name, args in self.calls if name == method]

    def _record(self, method: str, *args) -> AuthResult:
        self.calls.append((method, args))
        return self.results.get(method, AuthResult())

    async def sign_in_with_password(self, email, password):
        return self._record('sign_in_with_password', email, password)

    async def refresh_session(self, refresh_token):
        return self._record('refresh_session', refresh_token)

    async def sign_up(self, email, password, metadata, redirect_to=None):
        return self._record('sign_up', email, password, metadata, redirect_to)

    async def sign_out(self, access_token):
        return self._record('sign_out', access_token)

    async def reset_password_for_email(self, email, redirect_to=None):
        return self._record('reset_password_for_email', email, redirect_to)

    async def get_user(self, access_token):
        return self._record('get_user', access_token)

    async def set_session(self, access_token, refresh_token):
        return self._record('set_session', access_token, refresh_token)

    async def update_user(self, access_token, attributes):
        return self._record('update_user', access_token, attributes)


@pytest.fixture(autouse=True)
def identity_jwt_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setattr(config, 'IDENTITY_JWT_SECRET', TEST_JWT_SECRET)
    monkeypatch.setattr(config, 'IDENTITY_JWT_ALGORITHM', 'HS256')
    monkeypatch.setattr(config, 'IDENTITY_JWT_AUDIENCE', 'authenticated')
    return TEST_JWT_SECRET


@pytest.fixture
def fake_identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def profile_db():
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[Profile.__table__])

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=[Profile.__table__])


@pytest.fixture
def identity_user():
    def build(user_id='user-1', email='student@example.edu', role='student', full_name='Student User'):
        metadata = {'full_name': full_name}
        if role is not None:
            metadata['role'] = role
        return {'id': user_id, 'email': email, 'user_metadata': metadata}
    return build


@pytest.fixture
def signed_in_result(identity_user):
    def build(access_token='access-1', refresh_token='refresh-1', **user_fields):
        return AuthResult(
            user=identity_user(**user_fields),
            session=Session(access_token=access_token, refresh_token=refresh_token, expires_in=3600),
        )
    return build


@pytest.fixture
def make_token():
    def build(sub='user-1', email='student@example.edu', role='student', full_name='Student User', expires_in=300):
        now = datetime.now(timezone.utc)
        payload = {
            'sub': sub,
            'email': email,
            'aud': 'authenticated',
            'iat': now,
            'exp': now + timedelta(seconds=expires_in),
            'user_metadata': {'role': role, 'full_name': full_name},
        }
        return jwt.encode(payload, TEST_JWT_SECRET, algorithm='HS256')
    return build
