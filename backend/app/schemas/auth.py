from pydantic import EmailStr, Field

from app.schemas.common import APIModel
from app.schemas.user import UserOut


class SignupIn(APIModel):
    email: EmailStr
    # Length rules live in app.core.password_policy (driven by settings).
    password: str = Field(max_length=256)


class LoginIn(APIModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class AuthOut(APIModel):
    user: UserOut
    access_token: str


class AccessTokenOut(APIModel):
    access_token: str
