"""
Teacher authentication.

One teacher password lives in app_settings (hashed). A successful login
yields a JWT; changing the password bumps a token version so every older
session stops resolving.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from config import Config
from services import store

logger = logging.getLogger(__name__)

TEACHER_PASSWORD_KEY = "teacher_password"
TOKEN_VERSION_KEY = "token_version"
TEACHER_ROLE = "teacher"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class TeacherSession:
    subject: str
    expires_at: datetime


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticated:
    session: TeacherSession


AuthState = Union[Anonymous, Authenticated]


class PasswordChangeError(ValueError):
    pass


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _teacher_password_hash(db: Session) -> str:
    stored = store.get_setting(db, TEACHER_PASSWORD_KEY)
    if stored is None:
        stored = get_password_hash(Config.DEFAULT_TEACHER_PASSWORD)
        store.set_setting(db, TEACHER_PASSWORD_KEY, stored)
        logger.info("Teacher password initialised from default")
    return stored


def _token_version(db: Session) -> int:
    return int(store.get_setting(db, TOKEN_VERSION_KEY) or 0)


def authenticate_teacher(db: Session, password: str) -> bool:
    return verify_password(password, _teacher_password_hash(db))


def create_access_token(db: Session) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=Config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": TEACHER_ROLE,
        "role": TEACHER_ROLE,
        "ver": _token_version(db),
        "exp": expire,
    }
    return jwt.encode(to_encode, Config.SECRET_KEY, algorithm=Config.ALGORITHM)


def resolve_auth_state(db: Session, token: Optional[str]) -> AuthState:
    if not token:
        return Anonymous()
    try:
        payload = jwt.decode(token, Config.SECRET_KEY, algorithms=[Config.ALGORITHM])
    except JWTError:
        return Anonymous()

    if payload.get("role") != TEACHER_ROLE or payload.get("ver") != _token_version(db):
        return Anonymous()
    if "exp" not in payload:
        return Anonymous()

    expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    return Authenticated(TeacherSession(subject=payload.get("sub", TEACHER_ROLE), expires_at=expires_at))


def change_password(db: Session, current: str, new: str, confirm: str):
    if not authenticate_teacher(db, current):
        raise PasswordChangeError("Current password is incorrect")
    if len(new) < Config.MIN_PASSWORD_LENGTH:
        raise PasswordChangeError(f"New password must be at least {Config.MIN_PASSWORD_LENGTH} characters")
    if new != confirm:
        raise PasswordChangeError("Password confirmation does not match")

    store.set_setting(db, TEACHER_PASSWORD_KEY, get_password_hash(new))
    store.set_setting(db, TOKEN_VERSION_KEY, str(_token_version(db) + 1))
    logger.info("Teacher password changed; existing sessions revoked")
