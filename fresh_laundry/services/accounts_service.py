"""
Credential store for customers and admins.

Users and admins live in separate tables with the same shape, so one
service handles both; the ``AccountKind`` picks the table, the messages
shown to the caller and the role claim carried after login.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from fresh_laundry.core.errors import Conflict, Internal, InvalidInput, Unauthorized
from fresh_laundry.core.security import PasswordHasher
from fresh_laundry.db.session import Database
from fresh_laundry.models.tables import Admin, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountKind:
    name: str
    model: type
    role: Optional[str]
    conflict_message: str
    register_failed_message: str
    invalid_credentials_message: str
    login_failed_message: str


USER = AccountKind(
    name="user",
    model=User,
    role=None,
    conflict_message="User already exists.",
    register_failed_message="Registration failed.",
    invalid_credentials_message="Invalid credentials",
    login_failed_message="Login failed",
)

ADMIN = AccountKind(
    name="admin",
    model=Admin,
    role="admin",
    conflict_message="Admin email already exists.",
    register_failed_message="Admin registration failed.",
    invalid_credentials_message="Invalid admin credentials",
    login_failed_message="Admin login failed",
)


class AccountsService:
    def __init__(self, database: Database, hasher: PasswordHasher):
        self.database = database
        self.hasher = hasher

    def register(self, kind: AccountKind, name: str, email: str, password: str) -> dict:
        """Create an account, failing with ``Conflict`` if the email is taken in that namespace."""
        if not name or not email or not password:
            raise InvalidInput("Please provide name, email, and password.")

        hashed = self.hasher.hash(password)
        try:
            with self.database.session() as session:
                account = kind.model(name=name, email=email, password=hashed)
                session.add(account)
                session.flush()
                result = {"id": account.id, "name": account.name, "email": account.email}
        except IntegrityError:
            raise Conflict(kind.conflict_message)
        except SQLAlchemyError as e:
            logger.error("%s registration error: %s", kind.name.upper(), e, exc_info=True)
            raise Internal(kind.register_failed_message)

        logger.info("Registered %s %s (id=%s)", kind.name, email, result["id"])
        return result

    def authenticate(self, kind: AccountKind, email: str, password: str) -> dict:
        """Check credentials; unknown email and wrong password raise the same error."""
        try:
            with self.database.session() as session:
                account = session.execute(
                    select(kind.model).where(kind.model.email == email)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("%s login error: %s", kind.name.upper(), e, exc_info=True)
            raise Internal(kind.login_failed_message)

        if account is None:
            self.hasher.dummy_verify()
            raise Unauthorized(kind.invalid_credentials_message)
        if not self.hasher.verify(password, account.password):
            raise Unauthorized(kind.invalid_credentials_message)

        identity = {"id": account.id, "name": account.name, "email": account.email}
        if kind.role:
            identity["role"] = kind.role
        return identity
