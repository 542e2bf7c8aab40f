from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from typing import Optional

from fresh_laundry.core.errors import Unauthorized

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class PasswordHasher:
    def __init__(self, rounds: int = 10):
        self.pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self.pwd_ctx.hash(password)

    def verify(self, plain: str, hashed: str) -> bool:
        return self.pwd_ctx.verify(plain, hashed)

    def dummy_verify(self) -> bool:
        # Burns the same bcrypt cost as a real verify when the account is unknown.
        return self.pwd_ctx.dummy_verify()


class TokenIssuer:
    """Signs and checks the bearer tokens handed out at login."""

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def issue(self, identity: dict, ttl: timedelta) -> str:
        to_encode = {"id": identity["id"], "email": identity["email"]}
        if identity.get("role"):
            to_encode["role"] = identity["role"]
        to_encode["exp"] = datetime.now(timezone.utc) + ttl
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> dict:
        if not token:
            raise Unauthorized("Missing token", headers=BEARER_CHALLENGE)
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise Unauthorized("Invalid or expired token", headers=BEARER_CHALLENGE)
