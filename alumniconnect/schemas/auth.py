from pydantic import BaseModel

from alumniconnect.models.profile import Role


class User(BaseModel):
    id: str
    email: str
    full_name: str | None = None
    role: Role | None = None
    department: str | None = None


class Session(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int | None = None
    token_type: str = 'bearer'


class SessionContext(BaseModel):
    """Read-only view of the current user, owned by AuthSessionProvider."""
    user: User | None = None
    session: Session | None = None
    loading: bool = False

    model_config = {'frozen': True}


class ProfileFields(BaseModel):
    role: Role
    full_name: str
    department: str | None = None


class SignInRequest(BaseModel):
    email: str = ''
    password: str = ''


class SignUpRequest(BaseModel):
    email: str = ''
    password: str = ''
    confirm_password: str = ''
    full_name: str = ''
    role: str = ''
    department: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str = ''


class NewPasswordRequest(BaseModel):
    password: str = ''
    confirm_password: str = ''


class SignInResponse(BaseModel):
    user: User
    session: Session
    redirect_to: str | None = None


class MessageResponse(BaseModel):
    message: str


class ResetPasswordResponse(BaseModel):
    state: str
    error: str | None = None
    redirect_to: str | None = None
    redirect_after_seconds: int | None = None
