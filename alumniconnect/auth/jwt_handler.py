import jwt

from alumniconnect.core import config


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        config.IDENTITY_JWT_SECRET,
        algorithms=[config.IDENTITY_JWT_ALGORITHM],
        audience=config.IDENTITY_JWT_AUDIENCE,
    )
