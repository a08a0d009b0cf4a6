import asyncio

import pytest

from alumniconnect.auth.identity_client import AuthResult, IdentityError
from alumniconnect.auth.reset_flow import (
    EXPIRED_RESET_LINK,
    INVALID_RESET_LINK,
    ResetPasswordFlow,
    ResetState,
)
from alumniconnect.auth.session_provider import AuthSessionProvider
from alumniconnect.auth.validation import FILL_ALL_FIELDS, PASSWORD_TOO_SHORT, PASSWORDS_DO_NOT_MATCH


def _established_flow(fake_identity, signed_in_result) -> ResetPasswordFlow:
    fake_identity.respond('set_session', signed_in_result(access_token='reset-access', refresh_token='reset-refresh'))
    flow = ResetPasswordFlow(AuthSessionProvider(fake_identity))
    asyncio.run(flow.start({'access_token': 'reset-access', 'refresh_token': 'reset-refresh'}))
    return flow


@pytest.mark.parametrize(
    'query_params',
    [
        {'access_token': 'reset-access'},
        {'refresh_token': 'reset-refresh'},
        {'access_token': '', 'refresh_token': 'reset-refresh'},
        {},
    ],
)
def test_start_without_both_tokens_fails_without_contacting_identity(fake_identity, query_params) -> None:
    flow = ResetPasswordFlow(AuthSessionProvider(fake_identity))

    state = asyncio.run(flow.start(query_params))

    assert state is ResetState.FAILED
    assert flow.error == INVALID_RESET_LINK
    assert fake_identity.calls == []


def test_start_fails_when_tokens_are_rejected(fake_identity) -> None:
    fake_identity.respond('set_session', AuthResult(error=IdentityError('Invalid Refresh Token', 400)))
    flow = ResetPasswordFlow(AuthSessionProvider(fake_identity))

    state = asyncio.run(flow.start({'access_token': 'old', 'refresh_token': 'old'}))

    assert state is ResetState.FAILED
    assert flow.error == EXPIRED_RESET_LINK


def test_start_establishes_session(fake_identity, signed_in_result) -> None:
    flow = _established_flow(fake_identity, signed_in_result)

    assert flow.state is ResetState.SESSION_ESTABLISHED
    assert flow.error is None
    assert fake_identity.called('set_session') == [('reset-access', 'reset-refresh')]
    assert flow.provider.context.session.access_token == 'reset-access'


@pytest.mark.parametrize(
    ('password', 'confirm_password', 'error'),
    [
        ('', '', FILL_ALL_FIELDS),
        ('secret1', '', FILL_ALL_FIELDS),
        ('12345', '12345', PASSWORD_TOO_SHORT),
        ('secret1', 'secret2', PASSWORDS_DO_NOT_MATCH),
    ],
)
def test_submit_with_invalid_password_stays_established(
    fake_identity,
    signed_in_result,
    password: str,
    confirm_password: str,
    error: str,
) -> None:
    flow = _established_flow(fake_identity, signed_in_result)

    state = asyncio.run(flow.submit(password, confirm_password))

    assert state is ResetState.SESSION_ESTABLISHED
    assert flow.error == error
    assert fake_identity.called('update_user') == []


def test_submit_keeps_state_when_identity_rejects_password(fake_identity, signed_in_result) -> None:
    flow = _established_flow(fake_identity, signed_in_result)
    fake_identity.respond(
        'update_user',
        AuthResult(error=IdentityError('New password should be different from the old password.', 422)),
    )

    state = asyncio.run(flow.submit('secret1', 'secret1'))

    assert state is ResetState.SESSION_ESTABLISHED
    assert flow.error == 'New password should be different from the old password.'


def test_submit_updates_password_and_schedules_redirect(fake_identity, signed_in_result, monkeypatch) -> None:
    monkeypatch.setattr('alumniconnect.core.config.RESET_REDIRECT_URL', '/')
    monkeypatch.setattr('alumniconnect.core.config.RESET_REDIRECT_DELAY_SECONDS', 3)
    flow = _established_flow(fake_identity, signed_in_result)

    state = asyncio.run(flow.submit('new-secret', 'new-secret'))

    assert state is ResetState.PASSWORD_UPDATED
    assert flow.error is None
    assert flow.redirect_to == '/'
    assert flow.redirect_after_seconds == 3
    assert fake_identity.called('update_user') == [('reset-access', {'password': 'new-secret'})]


def test_submit_after_failed_start_does_nothing(fake_identity) -> None:
    flow = ResetPasswordFlow(AuthSessionProvider(fake_identity))
    asyncio.run(flow.start({}))

    state = asyncio.run(flow.submit('new-secret', 'new-secret'))

    assert state is ResetState.FAILED
    assert flow.error == INVALID_RESET_LINK
    assert fake_identity.calls == []
