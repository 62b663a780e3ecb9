"""
Identity store: registered users and the current session.

Users are persisted as a list under the ``users`` key and the session
under ``current_user``. Both are re-read from storage on every call so
another process writing the same data directory is observed; the last
writer wins.
"""

from __future__ import annotations

from typing import Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from ..models.user import Session, User
from ..storage.json_storage import JsonStorage
from ..utils.config import DEFAULT_AVATAR_TEMPLATE
from ..utils.exceptions import DuplicateEmailError, InvalidCredentialsError, MissingFieldsError
from ..utils.logger import get_logger

logger = get_logger(__name__)

USERS_KEY = "users"
SESSION_KEY = "current_user"

DEMO_USER_ID = "u_demo"
DEMO_USER_NAME = "Guest"
DEMO_USER_EMAIL = "guest@mini.local"
DEMO_USER_PASSWORD = "guest"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class IdentityStore:
    """Holds the email -> User mapping and the single active session"""

    def __init__(self, storage: JsonStorage, avatar_template: str = DEFAULT_AVATAR_TEMPLATE):
        self.storage = storage
        self.avatar_template = avatar_template
        self.users: Dict[str, User] = {}
        self._session: Optional[Session] = None
        self.reload()

    def reload(self) -> None:
        """Refresh users and session from storage."""
        self.users = self._load_users()
        self._session = self._load_session()

    def _load_users(self) -> Dict[str, User]:
        raw = self.storage.load(USERS_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Users blob is not a list, ignoring it")
            return {}
        users: Dict[str, User] = {}
        for i, item in enumerate(raw):
            try:
                user = User(**item)
            except (TypeError, ValidationError) as e:
                logger.warning("Skipping invalid user record", index=i, error=str(e))
                continue
            users[normalize_email(user.email)] = user
        return users

    def _load_session(self) -> Optional[Session]:
        raw = self.storage.load(SESSION_KEY, None)
        if raw is None:
            return None
        try:
            return Session(**raw)
        except (TypeError, ValidationError) as e:
            logger.warning("Discarding invalid session record", error=str(e))
            return None

    def _save_users(self) -> None:
        self.storage.save(USERS_KEY, [u.model_dump(mode="json") for u in self.users.values()])

    def _start_session(self, user: User) -> Session:
        session = user.to_session()
        self.storage.save(SESSION_KEY, session.model_dump(mode="json"))
        self._session = session
        return session

    def default_avatar(self, name: str) -> str:
        return self.avatar_template.replace("{name}", quote(name, safe=""))

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def current_session(self) -> Optional[Session]:
        """Re-read and return the persisted session."""
        self._session = self._load_session()
        return self._session

    def get_user(self, email: str) -> Optional[User]:
        self.users = self._load_users()
        return self.users.get(normalize_email(email))

    def list_users(self) -> List[User]:
        self.users = self._load_users()
        return list(self.users.values())

    def sign_up(self, name: str, email: str, password: str, avatar_ref: str = "") -> Session:
        """
        Register a user and log them in.

        - Name, email and password are required.
        - Email is unique after trimming and lowercasing.
        - A blank avatar is replaced by a generated initials avatar URL.
        """
        name = (name or "").strip()
        email = normalize_email(email)
        if not name or not email or not password:
            raise MissingFieldsError("Name, email and password are required")

        self.users = self._load_users()
        if email in self.users:
            logger.debug("Sign-up rejected, email taken", email=email)
            raise DuplicateEmailError(email)

        user = User(
            name=name,
            email=email,
            password_secret=password,
            avatar_ref=avatar_ref or self.default_avatar(name),
        )
        self.users[email] = user
        self._save_users()
        logger.info("User registered", user_id=user.id, email=email)
        return self._start_session(user)

    def log_in(self, email: str, password: str) -> Session:
        """Start a session for the user matching email and password exactly."""
        self.users = self._load_users()
        user = self.users.get(normalize_email(email))
        if user is None or user.password_secret != password:
            logger.debug("Login rejected", email=normalize_email(email))
            raise InvalidCredentialsError()
        session = self._start_session(user)
        logger.info("User logged in", user_id=user.id)
        return session

    def log_out(self) -> None:
        """Clear the session (idempotent)."""
        previous = self._session
        self.storage.delete(SESSION_KEY)
        self._session = None
        if previous is not None:
            logger.info("User logged out", user_id=previous.id)

    def ensure_demo_user(self) -> Optional[User]:
        """Seed the Guest account when no users are registered yet."""
        self.users = self._load_users()
        if self.users:
            return None
        demo = User(
            id=DEMO_USER_ID,
            name=DEMO_USER_NAME,
            email=DEMO_USER_EMAIL,
            password_secret=DEMO_USER_PASSWORD,
            avatar_ref=self.default_avatar(DEMO_USER_NAME),
        )
        self.users[demo.email] = demo
        self._save_users()
        logger.info("Seeded demo user", email=demo.email)
        return demo
