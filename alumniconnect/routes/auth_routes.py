from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from alumniconnect.auth.dependencies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    get_current_user,
    get_session_context,
    get_session_provider,
)
from alumniconnect.auth.identity_client import AuthResult
from alumniconnect.auth.reset_flow import ResetPasswordFlow, ResetState
from alumniconnect.auth.session_provider import AuthSessionProvider
from alumniconnect.auth.validation import (
    validate_forgot_password,
    validate_sign_in,
    validate_sign_up,
)
from alumniconnect.core import config
from alumniconnect.models.profile import parse_role
from alumniconnect.navigation import dashboard_route
from alumniconnect.schemas.auth import (
    ForgotPasswordRequest,
    MessageResponse,
    NewPasswordRequest,
    ProfileFields,
    ResetPasswordResponse,
    Session,
    SessionContext,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    User,
)

router = APIRouter(tags=['auth'])

SIGN_UP_SUCCESS = 'Account created successfully! You can now sign in.'
SIGN_OUT_SUCCESS = 'Signed out.'
RESET_EMAIL_SENT = 'Password reset email sent! Check your inbox for instructions.'


def raise_for_result(result: AuthResult, fallback: str) -> None:
    if result.ok:
        return
    error = result.error
    if error.status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        status_code = error.status_code
    elif error.status_code is not None and 400 <= error.status_code < 500:
        status_code = error.status_code
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
    raise HTTPException(status_code=status_code, detail=error.message or fallback)


def set_session_cookies(response: Response, session: Session) -> None:
    cookie_options = {
        'httponly': True,
        'secure': config.SESSION_COOKIE_SECURE,
        'samesite': 'lax',
    }
    response.set_cookie(ACCESS_TOKEN_COOKIE, session.access_token, max_age=session.expires_in, **cookie_options)
    response.set_cookie(REFRESH_TOKEN_COOKIE, session.refresh_token, **cookie_options)


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)


@router.post('/sign-in', response_model=SignInResponse)
async def sign_in(
    data: SignInRequest,
    response: Response,
    provider: AuthSessionProvider = Depends(get_session_provider),
):
    error = validate_sign_in(data.email, data.password)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    result = await provider.sign_in(data.email, data.password)
    raise_for_result(result, 'Failed to sign in')

    context = provider.context
    if context.user is None or context.session is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail='Failed to sign in')
    set_session_cookies(response, context.session)
    return SignInResponse(
        user=context.user,
        session=context.session,
        redirect_to=dashboard_route(context.user),
    )


@router.post('/sign-up', response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(data: SignUpRequest, provider: AuthSessionProvider = Depends(get_session_provider)):
    error = validate_sign_up(data.email, data.password, data.confirm_password, data.full_name, data.role)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    profile_fields = ProfileFields(
        role=parse_role(data.role),
        full_name=data.full_name,
        department=data.department or None,
    )
    result = await provider.sign_up(data.email, data.password, profile_fields)
    raise_for_result(result, 'Failed to create account')
    return MessageResponse(message=SIGN_UP_SUCCESS)


@router.post('/sign-out', response_model=MessageResponse)
async def sign_out(response: Response, provider: AuthSessionProvider = Depends(get_session_provider)):
    await provider.sign_out()
    clear_session_cookies(response)
    return MessageResponse(message=SIGN_OUT_SUCCESS)


@router.post('/forgot-password', response_model=MessageResponse)
async def forgot_password(
    data: ForgotPasswordRequest,
    provider: AuthSessionProvider = Depends(get_session_provider),
):
    error = validate_forgot_password(data.email)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    result = await provider.reset_password(data.email)
    raise_for_result(result, 'Failed to send reset email')
    return MessageResponse(message=RESET_EMAIL_SENT)


@router.get('/session', response_model=SessionContext, response_model_exclude={'session'})
def current_session(context: SessionContext = Depends(get_session_context)):
    return context


@router.get('/me', response_model=User)
def me(current_user: User = Depends(get_current_user)):
    return current_user


def _reset_response(flow: ResetPasswordFlow) -> JSONResponse:
    payload = ResetPasswordResponse(
        state=flow.state.value,
        error=flow.error,
        redirect_to=flow.redirect_to,
        redirect_after_seconds=flow.redirect_after_seconds,
    )
    if flow.state is ResetState.PASSWORD_UPDATED:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=payload.model_dump(),
            headers={'Refresh': f'{flow.redirect_after_seconds}; url={flow.redirect_to}'},
        )
    status_code = status.HTTP_400_BAD_REQUEST if flow.error else status.HTTP_200_OK
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@router.get('/reset-password')
async def start_password_reset(request: Request, provider: AuthSessionProvider = Depends(get_session_provider)):
    flow = ResetPasswordFlow(provider)
    await flow.start(request.query_params)
    return _reset_response(flow)


@router.post('/reset-password')
async def complete_password_reset(
    data: NewPasswordRequest,
    request: Request,
    provider: AuthSessionProvider = Depends(get_session_provider),
):
    flow = ResetPasswordFlow(provider)
    await flow.start(request.query_params)
    await flow.submit(data.password, data.confirm_password)
    return _reset_response(flow)
