"""Async client for the hosted identity service.

Speaks the GoTrue REST dialect (``/auth/v1/token``, ``/signup``, ``/recover``,
``/user``, ``/logout``). Every call returns an ``AuthResult``; upstream and
transport failures are reported through ``AuthResult.error`` instead of being
raised, so route handlers only have to branch on ``result.ok``.
"""
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from alumniconnect.core import config
from alumniconnect.schemas.auth import Session

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = 'Unable to reach the identity service. Please try again.'
UNEXPECTED_RESPONSE_MESSAGE = 'Unexpected response from the identity service.'


@dataclass
class IdentityError:
    message: str
    status_code: int | None = None


@dataclass
class AuthResult:
    user: dict[str, Any] | None = None
    session: Session | None = None
    error: IdentityError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ('error_description', 'msg', 'message', 'error'):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f'Identity service responded with status {response.status_code}.'


def _session_from(body: dict[str, Any]) -> Session | None:
    if not body.get('access_token') or not body.get('refresh_token'):
        return None
    return Session(
        access_token=body['access_token'],
        refresh_token=body['refresh_token'],
        expires_in=body.get('expires_in'),
        token_type=body.get('token_type') or 'bearer',
    )


class IdentityClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        self.http_client = http_client
        self.base_url = (base_url or config.IDENTITY_SERVICE_URL).rstrip('/')
        self.api_key = config.IDENTITY_SERVICE_ANON_KEY if api_key is None else api_key

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        return {
            'apikey': self.api_key,
            'Authorization': f'Bearer {access_token or self.api_key}',
            'Content-Type': 'application/json',
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | None = None,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> tuple[dict[str, Any], IdentityError | None]:
        try:
            response = await self.http_client.request(
                method,
                f'{self.base_url}/auth/v1{path}',
                headers=self._headers(access_token),
                params=params,
                json=json,
            )
        except httpx.HTTPError:
            logger.exception('Identity service request failed: %s %s', method, path)
            return {}, IdentityError(NETWORK_ERROR_MESSAGE)

        if response.is_error:
            return {}, IdentityError(_error_message(response), response.status_code)

        if not response.content:
            return {}, None
        try:
            body = response.json()
        except ValueError:
            logger.exception('Identity service returned a non-JSON body for %s %s', method, path)
            return {}, IdentityError(UNEXPECTED_RESPONSE_MESSAGE, response.status_code)
        return body if isinstance(body, dict) else {}, None

    async def _token_grant(self, grant_type: str, payload: dict[str, str]) -> AuthResult:
        body, error = await self._request('POST', '/token', params={'grant_type': grant_type}, json=payload)
        if error:
            return AuthResult(error=error)
        session = _session_from(body)
        if session is None:
            return AuthResult(error=IdentityError(UNEXPECTED_RESPONSE_MESSAGE))
        return AuthResult(user=body.get('user'), session=session)

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        return await self._token_grant('password', {'email': email, 'password': password})

    async def refresh_session(self, refresh_token: str) -> AuthResult:
        return await self._token_grant('refresh_token', {'refresh_token': refresh_token})

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any],
        redirect_to: str | None = None,
    ) -> AuthResult:
        params = {'redirect_to': redirect_to} if redirect_to else None
        body, error = await self._request(
            'POST',
            '/signup',
            params=params,
            json={'email': email, 'password': password, 'data': metadata},
        )
        if error:
            return AuthResult(error=error)
        # Auto-confirmed projects answer with a session, others with the bare user.
        return AuthResult(user=body.get('user') or body, session=_session_from(body))

    async def sign_out(self, access_token: str) -> AuthResult:
        _, error = await self._request('POST', '/logout', access_token=access_token)
        return AuthResult(error=error)

    async def reset_password_for_email(self, email: str, redirect_to: str | None = None) -> AuthResult:
        params = {'redirect_to': redirect_to} if redirect_to else None
        _, error = await self._request('POST', '/recover', params=params, json={'email': email})
        return AuthResult(error=error)

    async def get_user(self, access_token: str) -> AuthResult:
        body, error = await self._request('GET', '/user', access_token=access_token)
        if error:
            return AuthResult(error=error)
        return AuthResult(user=body)

    async def set_session(self, access_token: str, refresh_token: str) -> AuthResult:
        result = await self.get_user(access_token)
        if result.ok:
            result.session = Session(access_token=access_token, refresh_token=refresh_token)
            return result
        if result.error.status_code in (401, 403):
            return await self.refresh_session(refresh_token)
        return result

    async def update_user(self, access_token: str, attributes: dict[str, Any]) -> AuthResult:
        body, error = await self._request('PUT', '/user', access_token=access_token, json=attributes)
        if error:
            return AuthResult(error=error)
        return AuthResult(user=body)
