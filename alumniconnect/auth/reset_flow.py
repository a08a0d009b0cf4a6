import enum
import logging
from collections.abc import Mapping

from alumniconnect.auth.session_provider import AuthSessionProvider
from alumniconnect.auth.validation import validate_new_password
from alumniconnect.core import config

logger = logging.getLogger(__name__)

INVALID_RESET_LINK = 'Invalid reset link. Please request a new password reset.'
EXPIRED_RESET_LINK = 'Invalid or expired reset link. Please request a new password reset.'


class ResetState(str, enum.Enum):
    AWAITING_TOKENS = 'awaiting_tokens'
    SESSION_ESTABLISHED = 'session_established'
    PASSWORD_UPDATED = 'password_updated'
    FAILED = 'failed'


class ResetPasswordFlow:
    """Drives a password reset from the emailed link to the updated password.

    awaiting_tokens -> session_established -> password_updated
                    \\-> failed
    """

    def __init__(self, provider: AuthSessionProvider):
        self.provider = provider
        self.state = ResetState.AWAITING_TOKENS
        self.error: str | None = None
        self.redirect_to: str | None = None
        self.redirect_after_seconds: int | None = None

    def _fail(self, message: str) -> ResetState:
        self.state = ResetState.FAILED
        self.error = message
        return self.state

    async def start(self, query_params: Mapping[str, str]) -> ResetState:
        if self.state is not ResetState.AWAITING_TOKENS:
            return self.state

        access_token = query_params.get('access_token')
        refresh_token = query_params.get('refresh_token')
        if not access_token or not refresh_token:
            return self._fail(INVALID_RESET_LINK)

        result = await self.provider.establish_session(access_token, refresh_token)
        if not result.ok:
            logger.info('Reset link rejected by identity service: %s', result.error.message)
            return self._fail(EXPIRED_RESET_LINK)

        self.state = ResetState.SESSION_ESTABLISHED
        self.error = None
        return self.state

    async def submit(self, password: str, confirm_password: str) -> ResetState:
        if self.state is not ResetState.SESSION_ESTABLISHED:
            return self.state

        self.error = validate_new_password(password, confirm_password)
        if self.error:
            return self.state

        result = await self.provider.update_password(password)
        if not result.ok:
            self.error = result.error.message
            return self.state

        self.state = ResetState.PASSWORD_UPDATED
        self.redirect_to = config.RESET_REDIRECT_URL
        self.redirect_after_seconds = config.RESET_REDIRECT_DELAY_SECONDS
        return self.state
