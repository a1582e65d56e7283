import logging
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import AuthError, ConflictError, ValidationError
from ..models import User

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Email and password required"
INVALID_CREDENTIALS = "Invalid email or password"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    password_bytes = plain_password.encode('utf-8')[:72]
    hashed_bytes = hashed_password.encode('utf-8') if isinstance(hashed_password, str) else hashed_password
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash.
        logger.warning("Unverifiable password hash in credential store")
        return False


def hash_password(password: str) -> str:
    """Hash a password using bcrypt with a fresh salt."""
    password_bytes = password.encode('utf-8')[:72]  # Truncate to 72 bytes (bcrypt limit)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def _require_credentials(email: Optional[str], password: Optional[str]) -> str:
    if not email or not email.strip() or not password:
        raise ValidationError(MISSING_CREDENTIALS)
    return email.strip()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def signup(db: Session, email: Optional[str], password: Optional[str]) -> User:
    """Register a new account. Raises ConflictError if the email is taken."""
    email = _require_credentials(email, password)

    if get_user_by_email(db, email):
        raise ConflictError("Email already registered")

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email.
        db.rollback()
        raise ConflictError("Email already registered")
    db.refresh(user)

    logger.info("Registered user %s", user.email)
    return user


def login(db: Session, email: Optional[str], password: Optional[str]) -> User:
    """Check credentials. Unknown email and wrong password fail identically."""
    email = _require_credentials(email, password)

    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthError(INVALID_CREDENTIALS)
    return user
