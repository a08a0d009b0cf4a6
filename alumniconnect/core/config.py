import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:8080")
CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), [FRONTEND_URL])

IDENTITY_SERVICE_URL = os.getenv("IDENTITY_SERVICE_URL", "http://localhost:54321")
IDENTITY_SERVICE_ANON_KEY = os.getenv("IDENTITY_SERVICE_ANON_KEY", "")
IDENTITY_JWT_SECRET = os.getenv("IDENTITY_JWT_SECRET", "")
IDENTITY_JWT_ALGORITHM = os.getenv("IDENTITY_JWT_ALGORITHM", "HS256")
IDENTITY_JWT_AUDIENCE = os.getenv("IDENTITY_JWT_AUDIENCE", "authenticated")

PASSWORD_RESET_REDIRECT_URL = os.getenv("PASSWORD_RESET_REDIRECT_URL", f"{FRONTEND_URL}/reset-password")
RESET_REDIRECT_URL = os.getenv("RESET_REDIRECT_URL", "/")
RESET_REDIRECT_DELAY_SECONDS = int(os.getenv("RESET_REDIRECT_DELAY_SECONDS", "3"))

SESSION_COOKIE_SECURE = _get_bool(os.getenv("SESSION_COOKIE_SECURE"), default=False)

MENTORSHIP_UPSTREAM_URL = os.getenv("MENTORSHIP_UPSTREAM_URL", "")
MENTORSHIP_UPSTREAM_USERNAME = os.getenv("MENTORSHIP_UPSTREAM_USERNAME", "")
MENTORSHIP_UPSTREAM_PASSWORD = os.getenv("MENTORSHIP_UPSTREAM_PASSWORD", "")
MENTORSHIP_PROXY_URL = os.getenv("MENTORSHIP_PROXY_URL", "http://localhost:4000/mentorship")

REFERRAL_API_URL = os.getenv("REFERRAL_API_URL", "http://localhost:3000")
REFERRAL_API_TOKEN = os.getenv("REFERRAL_API_TOKEN", "")

PORT = int(os.getenv("PORT", "4000"))


def _missing(settings: dict[str, str]) -> list[str]:
    return [name for name, value in settings.items() if not value]


def validate_runtime_config() -> None:
    if APP_ENV.lower() != "production":
        return
    missing = _missing({
        "IDENTITY_SERVICE_ANON_KEY": IDENTITY_SERVICE_ANON_KEY,
        "IDENTITY_JWT_SECRET": IDENTITY_JWT_SECRET,
        "REFERRAL_API_TOKEN": REFERRAL_API_TOKEN,
    })
    if missing:
        raise RuntimeError(f"{', '.join(missing)} must be set in production.")


def validate_proxy_config() -> None:
    if APP_ENV.lower() != "production":
        return
    missing = _missing({
        "MENTORSHIP_UPSTREAM_URL": MENTORSHIP_UPSTREAM_URL,
        "MENTORSHIP_UPSTREAM_USERNAME": MENTORSHIP_UPSTREAM_USERNAME,
        "MENTORSHIP_UPSTREAM_PASSWORD": MENTORSHIP_UPSTREAM_PASSWORD,
    })
    if missing:
        raise RuntimeError(f"{', '.join(missing)} must be set in production.")
