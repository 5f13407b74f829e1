import logging

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.infrastructure.db.models import User

logger = logging.getLogger(__name__)

# pbkdf2_sha256: no native deps
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


class RegistrationError(ValueError):
    pass


class EmailTakenError(RegistrationError):
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def register_user(db: Session, email: str, password: str) -> User:
    """
    Raises:
        RegistrationError: password too short
        EmailTakenError: email already registered
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if get_user_by_email(db, email) is not None:
        raise EmailTakenError("Email already registered")

    user = User(email=email.strip().lower(), password_hash=hash_password(password), is_premium=False)
    db.add(user)
    db.commit()
    logger.info("Registered user %d", user.id)
    return user
