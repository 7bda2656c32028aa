"""Account registration and login."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import generate_password_hash, check_password_hash

from app.auth import issue_token
from app.errors import ConflictError, UnauthorizedError, ValidationError
from app.models.user import User

INVALID_CREDENTIALS = "Invalid email or password"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


class CredentialService:
    """
    Creates accounts and exchanges credentials for bearer tokens.

    Login failures never say whether the email or the password was wrong.
    """

    async def register(
        self,
        db: AsyncSession,
        name: str,
        email: str,
        password: str,
    ) -> tuple[str, User]:
        """
        Create a user and issue a token for it.

        Raises:
            ValidationError: a field is missing or blank
            ConflictError: the email is already registered
        """
        if not (name or "").strip() or not (email or "").strip() or not password:
            raise ValidationError("Name, email and password are required")

        user = User(name=name.strip(), email=email.strip(), password=hash_password(password))
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            # users.email is unique
            await db.rollback()
            raise ConflictError("Email already registered")
        await db.refresh(user)

        return issue_token(user.id), user

    async def login(self, db: AsyncSession, email: str, password: str) -> tuple[str, User]:
        """Check credentials and issue a token. Raises UnauthorizedError on any mismatch."""
        result = await db.execute(select(User).where(User.email == (email or "").strip()))
        user = result.scalar_one_or_none()

        if user is None or not password or not verify_password(user.password, password):
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return issue_token(user.id), user


# Singleton instance
credential_service = CredentialService()
