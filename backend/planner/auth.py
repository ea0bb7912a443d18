# backend/planner/auth.py
"""
Authentication helpers for the study planner.

Provides:
 - get_password_hash(password) -> str
 - verify_password(plain_password, hashed_password) -> bool
 - create_access_token(student_id, email, full_name, expires_delta=None) -> str
 - decode_access_token(token) -> student id (raises JWTError)
 - authenticate_student(db, email, password) -> Student or None

Passwords are pre-hashed with SHA-256 (hex) to stay under the bcrypt 72-byte limit,
then stored through a passlib CryptContext (bcrypt_sha256 preferred).
"""

import hashlib
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import models
from .config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY, TOKEN_AUDIENCE, TOKEN_ISSUER
from .utils import normalize_email

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt_sha256", "bcrypt"], deprecated="auto", default="bcrypt_sha256")


def _sha256_hex(s: str) -> str:
    """Return SHA-256 hex digest of the given string (deterministic, 64 hex chars)."""
    if isinstance(s, bytes):
        b = s
    else:
        b = s.encode("utf-8", errors="surrogatepass")
    return hashlib.sha256(b).hexdigest()


def get_password_hash(password: str) -> str:
    digest = _sha256_hex(password)
    return pwd_context.hash(digest)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    digest = _sha256_hex(plain_password)
    try:
        return pwd_context.verify(digest, hashed_password)
    except (ValueError, TypeError):
        # malformed or unknown hash format
        logger.warning("Stored password hash could not be verified")
        return False


def create_access_token(
    student_id: str, email: str, full_name: str, expires_delta: Optional[timedelta] = None
) -> str:
    """Signed JWT carrying the student id as `sub`."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": student_id,
        "email": email,
        "fullName": full_name,
        "jti": str(uuid.uuid4()),
        "iat": int(now.timestamp()),
        "exp": expire,
        "iss": TOKEN_ISSUER,
        "aud": TOKEN_AUDIENCE,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Returns the student id if the token is valid, otherwise raises JWTError.
    """
    payload = jwt.decode(
        token, SECRET_KEY, algorithms=[ALGORITHM], audience=TOKEN_AUDIENCE, issuer=TOKEN_ISSUER
    )
    student_id = payload.get("sub")
    if not student_id:
        raise JWTError("Token has no subject")
    return student_id


def authenticate_student(db: Session, email: str, password: str) -> Optional[models.Student]:
    """
    Find a student by email (case-insensitive) and verify the password.
    Returns the student on success, or None on failure.
    """
    student = (
        db.query(models.Student)
        .filter(models.Student.email == normalize_email(email))
        .first()
    )
    if not student:
        return None
    if not verify_password(password, student.password_hash):
        return None
    return student
