import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError

from scoreboard.errors import DuplicateEmail, InvalidCredentials, Unauthenticated, UserNotFound
from scoreboard.models import AuthSession, User, utcnow
from scoreboard.schemas import MAX_PASSWORD_BYTES, normalize_email


@dataclass(frozen=True)
class Identity:
    """The user a session token resolves to."""

    user_id: int
    persistent: bool
    expires_at: datetime


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


class IdentityManager:
    """Credential checks, server-side sessions and profile edits.

    Session tokens are opaque random strings handed to the client; only their
    sha256 digest is stored.
    """

    def __init__(self, session, bcrypt, session_lifetime: timedelta,
                 remember_lifetime: timedelta, logger):
        self.session = session
        self.bcrypt = bcrypt
        self.session_lifetime = session_lifetime
        self.remember_lifetime = remember_lifetime
        self.logger = logger
        self._dummy_hash = None

    # ---- credentials ----

    def register(self, name: str, email: str, password: str) -> str:
        """Create a user and log them in; returns the new session token."""
        email = normalize_email(email)
        user = User(
            name=name,
            email=email,
            password_hash=self.bcrypt.generate_password_hash(password).decode('utf-8'),
        )
        self.session.add(user)
        try:
            # The unique index on email settles concurrent registrations.
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            self.logger.info(f"[register] duplicate email={email}")
            raise DuplicateEmail() from exc
        self.logger.info(f"[register] user={user.id}")
        return self._issue_session(user.id, remember=False)

    def login(self, email: str, password: str, remember: bool = False) -> str:
        user = self.session.query(User).filter_by(email=normalize_email(email)).first()
        if not self._password_matches(user, password):
            self.logger.info("[login] rejected")
            raise InvalidCredentials()
        token = self._issue_session(user.id, remember=remember)
        self.logger.info(f"[login] user={user.id} persistent={bool(remember)}")
        return token

    def _password_matches(self, user: Optional[User], password: str) -> bool:
        if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
            return False
        if user is None:
            # Unknown emails still cost one bcrypt check.
            self.bcrypt.check_password_hash(self._get_dummy_hash(), password)
            return False
        return self.bcrypt.check_password_hash(user.password_hash, password)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.bcrypt.generate_password_hash(
                secrets.token_urlsafe(16)).decode('utf-8')
        return self._dummy_hash

    # ---- sessions ----

    def _issue_session(self, user_id: int, remember: bool) -> str:
        token = secrets.token_urlsafe(32)
        lifetime = self.remember_lifetime if remember else self.session_lifetime
        now = utcnow()
        self.session.add(AuthSession(
            token_hash=hash_token(token),
            user_id=user_id,
            persistent=bool(remember),
            created_at=now,
            expires_at=now + lifetime,
        ))
        self.session.commit()
        return token

    def logout(self, token: Optional[str]) -> None:
        """Destroy the session for ``token``; unknown tokens are ignored."""
        if not token:
            return
        deleted = self.session.query(AuthSession).filter_by(token_hash=hash_token(token)).delete()
        self.session.commit()
        if deleted:
            self.logger.info("[logout] session destroyed")

    def resolve_session(self, token: Optional[str]) -> Identity:
        if not token:
            raise Unauthenticated()
        record = self.session.query(AuthSession).filter_by(token_hash=hash_token(token)).first()
        if record is None:
            raise Unauthenticated()
        if record.is_expired():
            self.session.delete(record)
            self.session.commit()
            raise Unauthenticated()
        return Identity(user_id=record.user_id, persistent=record.persistent,
                        expires_at=record.expires_at)

    def purge_expired(self) -> int:
        count = self.session.query(AuthSession).filter(AuthSession.expires_at <= utcnow()).delete()
        self.session.commit()
        self.logger.info(f"[purge] removed {count} expired sessions")
        return count

    # ---- profile ----

    def get_profile(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise UserNotFound()
        return user

    def update_profile(self, user_id: int, name: Optional[str] = None,
                       email: Optional[str] = None) -> User:
        """Merge ``name``/``email`` into the profile; falsy values are skipped."""
        user = self.get_profile(user_id)
        user.name = name or user.name
        user.email = normalize_email(email) if email else user.email
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateEmail() from exc
        self.logger.info(f"[profile] user={user.id} updated")
        return user
