import base64
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from ociextract.exceptions import ConfigurationError
from ociextract.oras.defaults import (
    basic_password_env,
    basic_user_env,
    placeholder_token,
)


class AuthScheme(Enum):
    TOKEN = "token"
    BASIC = "basic"


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("utf-8")


@dataclass(frozen=True)
class AuthorizationContext:
    """
    The Authorization header sent with every registry request.
    Built once per run and only read afterwards.
    """

    scheme: AuthScheme
    header_value: str = field(repr=False)

    @property
    def headers(self) -> dict:
        return {"Authorization": self.header_value}

    @classmethod
    def token(cls, token: str = placeholder_token) -> "AuthorizationContext":
        return cls(AuthScheme.TOKEN, f"Bearer {_b64(token)}")

    @classmethod
    def basic(cls, username: str, password: str) -> "AuthorizationContext":
        return cls(AuthScheme.BASIC, f"Basic {_b64(f'{username}:{password}')}")


def authorization_from_environment(
    scheme: AuthScheme, environ: Optional[Mapping[str, str]] = None
) -> AuthorizationContext:
    """
    Token auth uses the fixed placeholder token. Basic auth reads the
    credentials from BASIC_USER and BASIC_PASSWORD.
    """
    if scheme is AuthScheme.TOKEN:
        return AuthorizationContext.token()

    if environ is None:
        environ = os.environ
    username = environ.get(basic_user_env)
    password = environ.get(basic_password_env)
    if username is None:
        raise ConfigurationError(
            f"Basic authentication username not provided (set {basic_user_env})"
        )
    if password is None:
        raise ConfigurationError(
            f"Basic authentication password not provided (set {basic_password_env})"
        )
    return AuthorizationContext.basic(username, password)
