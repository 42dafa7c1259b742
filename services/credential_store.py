# File: services/credential_store.py
import logging
import os
import threading
from datetime import datetime
from typing import Callable, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.db import SessionLocal
from database.models.auth_models import User
from services.errors import ConflictError

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Persists user records and answers lookups by email or id.
    Emails are expected to arrive already normalized.
    """

    def create_user(self, user: User) -> User:
        raise NotImplementedError

    def get_user_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError


class InMemoryCredentialStore(CredentialStore):
    """Process-local store for tests and ephemeral deployments."""

    def __init__(self):
        self._by_email: Dict[str, User] = {}
        self._by_id: Dict[str, User] = {}
        self._lock = threading.Lock()

    def create_user(self, user: User) -> User:
        with self._lock:
            if user.email in self._by_email:
                raise ConflictError("Email already registered")
            if user.created_at is None:
                user.created_at = datetime.utcnow()
            self._by_email[user.email] = user
            self._by_id[user.id] = user
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._by_email.get(email)

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self._by_id.get(user_id)


class SqlCredentialStore(CredentialStore):
    """
    Backed by the `users` table. One short-lived session per call; returned
    rows are detached so callers can use them after the session closes.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    def create_user(self, user: User) -> User:
        db = self._session_factory()
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
            db.expunge(user)
            return user
        except IntegrityError as e:
            db.rollback()
            logger.info(f"Duplicate user insert rejected: {e.orig}")
            raise ConflictError("Email already registered") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def get_user_by_email(self, email: str) -> Optional[User]:
        db = self._session_factory()
        try:
            return db.query(User).filter(User.email == email).first()
        finally:
            db.close()

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        db = self._session_factory()
        try:
            return db.query(User).filter(User.id == user_id).first()
        finally:
            db.close()


def build_credential_store(backend: Optional[str] = None) -> CredentialStore:
    backend = (backend or os.getenv("CREDENTIAL_STORE", "sql")).lower()
    if backend == "memory":
        logger.warning("Using in-memory credential store; users are lost on restart")
        return InMemoryCredentialStore()
    if backend == "sql":
        return SqlCredentialStore()
    raise ValueError(f"Unsupported credential store backend: {backend}")
