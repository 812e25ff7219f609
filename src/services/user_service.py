"""Service layer for user accounts."""
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import hash_password, verify_password
from models.user import User, UserRole
from schemas.user import UserCreate, UserUpdate
from services.exceptions import UserAlreadyExistsError, UserNotFoundError

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get a user by email, returns None if not exists."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: UUID) -> User:
    """
    Get a user by ID.

    Raises:
        UserNotFoundError: If the user doesn't exist.
    """
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    """
    Check credentials.

    Returns:
        The user, or None when the email is unknown, the password is wrong, or
        the account is disabled. Callers must not reveal which.
    """
    user = await get_user_by_email(db, email)
    if user is None or user.is_disabled:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


async def list_users(db: AsyncSession) -> list[User]:
    """Get all users, newest first."""
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return list(result.scalars().all())


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """
    Create a user with a hashed password.

    Raises:
        UserAlreadyExistsError: If the email is already registered.
    """
    if await get_user_by_email(db, data.email) is not None:
        raise UserAlreadyExistsError(data.email)

    user = User(
        email=data.email,
        password_hash=hash_password(data.password),
        role=data.role,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        # Handle race condition: another request registered the email between check and flush
        raise UserAlreadyExistsError(data.email) from e
    logger.info("Created %s user %s", data.role, user.id)
    return user


async def update_user(db: AsyncSession, user_id: UUID, data: UserUpdate) -> User:
    """
    Change a user's password, role and/or disabled flag.

    Raises:
        UserNotFoundError: If the user doesn't exist.
    """
    user = await get_user(db, user_id)
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)

    if "password" in update_data:
        user.password_hash = hash_password(update_data.pop("password"))
    for field, value in update_data.items():
        setattr(user, field, value)
    await db.flush()
    return user


async def delete_user(db: AsyncSession, user_id: UUID) -> None:
    """
    Delete a user. Entries, tags and their associations cascade in the database.

    Raises:
        UserNotFoundError: If the user doesn't exist.
    """
    user = await get_user(db, user_id)
    await db.delete(user)
    await db.flush()
    logger.info("Deleted user %s", user_id)


async def create_admin(db: AsyncSession, email: str, password: str) -> User:
    """Create an ADMIN account directly (used by bootstrap)."""
    user = User(
        email=email,
        password_hash=hash_password(password),
        role=UserRole.ADMIN.value,
    )
    db.add(user)
    await db.flush()
    return user
