# File: services/session_service.py
import hashlib
import logging
import os
import threading
import uuid
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from cachetools import TTLCache
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from database.db import SessionLocal
from database.models.auth_models import User, UserSession
from services.credential_store import CredentialStore
from services.errors import AuthError, ValidationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "12"))
MIN_PASSWORD_LENGTH = 6

AUTH_REQUIRED_MESSAGE = "Authentication required"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."
INVALID_SIGNUP_MESSAGE = "Provide a valid email and a password with at least 6 characters."

_DEV_SECRET = "paper-summary-secret"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

Identity = Dict[str, str]


def get_session_secret() -> str:
    secret = os.getenv("SESSION_SECRET")
    if not secret:
        logger.warning("SESSION_SECRET is not set; using the development secret")
        return _DEV_SECRET
    return secret


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def _get_email_hash(email: str) -> str:
    """Returns SHA-256 hash of the email for secure logging."""
    return hashlib.sha256(normalize_email(email).encode("utf-8")).hexdigest()


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        # Unrecognized or corrupted hash
        return False


# ------------------------------------------------------------
# ACTIVE SESSION SET
# ------------------------------------------------------------
class SessionRegistry:
    """Tracks which session ids are live. Tokens are only honored while listed here."""

    def open(self, session_id: str, user_id: str, expires_at: datetime) -> None:
        raise NotImplementedError

    def is_active(self, session_id: str) -> bool:
        raise NotImplementedError

    def revoke(self, session_id: str) -> None:
        raise NotImplementedError


class InMemorySessionRegistry(SessionRegistry):
    def __init__(self, ttl_seconds: int = SESSION_TTL_HOURS * 3600, maxsize: int = 10000):
        self._sessions = TTLCache(maxsize=maxsize, ttl=ttl_seconds)
        self._lock = threading.Lock()

    def open(self, session_id: str, user_id: str, expires_at: datetime) -> None:
        with self._lock:
            self._sessions[session_id] = user_id

    def is_active(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def revoke(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)


class SqlSessionRegistry(SessionRegistry):
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    def open(self, session_id: str, user_id: str, expires_at: datetime) -> None:
        db = self._session_factory()
        try:
            db.add(UserSession(id=session_id, user_id=user_id, expires_at=expires_at))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def is_active(self, session_id: str) -> bool:
        db = self._session_factory()
        try:
            row = db.query(UserSession).filter(UserSession.id == session_id).first()
            if row is None or row.revoked:
                return False
            return row.expires_at > datetime.utcnow()
        finally:
            db.close()

    def revoke(self, session_id: str) -> None:
        db = self._session_factory()
        try:
            db.query(UserSession).filter(UserSession.id == session_id).update({"revoked": True})
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


def build_session_registry(backend: Optional[str] = None) -> SessionRegistry:
    backend = (backend or os.getenv("CREDENTIAL_STORE", "sql")).lower()
    if backend == "memory":
        return InMemorySessionRegistry()
    if backend == "sql":
        return SqlSessionRegistry()
    raise ValueError(f"Unsupported session registry backend: {backend}")


# ------------------------------------------------------------
# SESSION GATE
# ------------------------------------------------------------
class SessionGate:
    """
    Authentication boundary: signup, login, logout, and token -> identity.
    Every rejection in `authenticate` carries the same message so callers
    learn nothing about which users exist.
    """

    def __init__(
        self,
        store: CredentialStore,
        registry: SessionRegistry,
        secret_key: Optional[str] = None,
        ttl: timedelta = timedelta(hours=SESSION_TTL_HOURS),
    ):
        self.store = store
        self.registry = registry
        self.secret_key = secret_key or get_session_secret()
        self.ttl = ttl

    def signup(self, name: str, email: str, password: str) -> Tuple[Identity, str]:
        email = normalize_email(email)
        password = password or ""
        if not email or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(INVALID_SIGNUP_MESSAGE)

        user = User(
            id=str(uuid.uuid4()),
            name=(name or "").strip() or "Guest",
            email=email,
            password_hash=hash_password(password),
            created_at=datetime.utcnow(),
        )
        # ConflictError propagates; the store enforces uniqueness atomically
        user = self.store.create_user(user)
        logger.info(f"USER_SIGNUP user_id={user.id} email_hash={_get_email_hash(email)}")
        return self._open_session(user)

    def login(self, email: str, password: str) -> Tuple[Identity, str]:
        email = normalize_email(email)
        user = self.store.get_user_by_email(email) if email else None

        if user is None:
            pwd_context.dummy_verify()
            logger.info(f"Login rejected for {_get_email_hash(email)}")
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        if not verify_password(password or "", user.password_hash):
            logger.info(f"Login rejected for {_get_email_hash(email)}")
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        logger.info(f"USER_LOGIN user_id={user.id}")
        return self._open_session(user)

    def logout(self, token: Optional[str]) -> None:
        claims = self._decode(token)
        self.registry.revoke(claims["sid"])
        logger.info(f"USER_LOGOUT user_id={claims.get('sub')}")

    def authenticate(self, token: Optional[str]) -> Identity:
        claims = self._decode(token)
        if not self.registry.is_active(claims["sid"]):
            raise AuthError(AUTH_REQUIRED_MESSAGE)

        user = self.store.get_user_by_id(claims["sub"])
        if user is None:
            raise AuthError(AUTH_REQUIRED_MESSAGE)
        return user.to_identity()

    def _open_session(self, user: User) -> Tuple[Identity, str]:
        session_id = str(uuid.uuid4())
        expires_at = datetime.utcnow() + self.ttl
        self.registry.open(session_id, user.id, expires_at)

        identity = user.to_identity()
        to_encode = {
            "sub": user.id,
            "sid": session_id,
            "name": user.name,
            "email": user.email,
            "exp": expires_at,
        }
        token = jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)
        return identity, token

    def _decode(self, token: Optional[str]) -> dict:
        if not token:
            raise AuthError(AUTH_REQUIRED_MESSAGE)
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError:
            raise AuthError(AUTH_REQUIRED_MESSAGE)
        if not claims.get("sub") or not claims.get("sid"):
            raise AuthError(AUTH_REQUIRED_MESSAGE)
        return claims
