import hmac
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import ClassVar, Iterator, List, Optional

from sqlalchemy import event, func
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Field, Relationship, Session, SQLModel, create_engine, select

from passvault.client.config import get_settings
from passvault.core.errors import DuplicateUsername, NotFound, StorageError, ValidationFailed, VaultError
from passvault.core.models import CredentialRecord, SearchScope, UserRecord

logger = logging.getLogger(__name__)

# --- 1. Table models ---

class User(SQLModel, table=True):
    __tablename__: ClassVar[str] = "users"
    __table_args__ = {"extend_existing": True}
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    password: str
    password_hint: str = ""
    credentials: List["Credential"] = Relationship(
        back_populates="owner",
        sa_relationship_kwargs={"cascade": "all, delete", "passive_deletes": True},
    )


class Credential(SQLModel, table=True):
    __tablename__: ClassVar[str] = "credentials"
    __table_args__ = {"extend_existing": True}
    id: Optional[int] = Field(default=None, primary_key=True)
    owner_user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    site: str
    username: str
    password: str
    owner: Optional[User] = Relationship(back_populates="credentials")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES ... ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    connect_args = {}
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    if is_sqlite:
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, echo=echo, connect_args=connect_args)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _matches(credential: CredentialRecord, needle: str, scope: SearchScope) -> bool:
    in_site = needle in credential.site.lower()
    in_username = needle in credential.username.lower()
    if scope is SearchScope.SITE:
        return in_site
    if scope is SearchScope.USERNAME:
        return in_username
    return in_site or in_username


# --- 2. Store ---

class CredentialStore:
    """Users and their site credentials in a local relational database.

    Every public method opens its own session and releases it before
    returning. Writes are serialized through one lock so cascading deletes
    and the username uniqueness check never interleave.
    """

    def __init__(self, database_url: Optional[str] = None, echo: Optional[bool] = None):
        settings = get_settings()
        self.database_url = database_url or settings.DATABASE_URL
        self.engine = build_engine(self.database_url, settings.DB_ECHO if echo is None else echo)
        self._write_lock = threading.RLock()
        self.init_db()

    def init_db(self):
        try:
            SQLModel.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not initialise database: {exc}") from exc
        logger.debug("Database ready: %s", self.engine.url)

    def dispose(self):
        self.engine.dispose()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = Session(self.engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except VaultError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Storage operation failed: %s", exc)
            raise StorageError(str(exc)) from exc
        finally:
            session.close()

    @contextmanager
    def _write(self) -> Iterator[Session]:
        with self._write_lock:
            with self._session() as session:
                yield session

    # --- Users ---
    def create_user(self, username: str, password: str, hint: str = "") -> int:
        if not username or not username.strip():
            raise ValidationFailed("Username must not be empty", ["username"])
        with self._write() as session:
            existing = session.exec(select(User).where(User.username == username)).first()
            if existing:
                raise DuplicateUsername(username)
            user = User(username=username, password=password, password_hint=hint)
            session.add(user)
            try:
                session.flush()
            except IntegrityError as exc:
                raise DuplicateUsername(username) from exc
            user_id = user.id
        logger.info("Created user %s (id=%s)", username, user_id)
        return user_id

    def authenticate(self, username: str, password: str) -> Optional[UserRecord]:
        with self._session() as session:
            user = session.exec(select(User).where(User.username == username)).first()
            if user is None:
                return None
            if not hmac.compare_digest(user.password.encode("utf-8"), password.encode("utf-8")):
                return None
            return UserRecord.model_validate(user)

    def get_user(self, username: str) -> Optional[UserRecord]:
        with self._session() as session:
            user = session.exec(select(User).where(User.username == username)).first()
            return UserRecord.model_validate(user) if user else None

    def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        with self._session() as session:
            user = session.get(User, user_id)
            return UserRecord.model_validate(user) if user else None

    def update_user_profile(self, user_id: int, new_hint: str, new_password: str) -> None:
        with self._write() as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFound(f"User {user_id} not found")
            user.password_hint = new_hint
            user.password = new_password
            session.add(user)
        logger.info("Updated profile of user id=%s", user_id)

    def delete_user(self, user_id: int) -> None:
        with self._write() as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFound(f"User {user_id} not found")
            session.delete(user)
        logger.info("Deleted user id=%s and its credentials", user_id)

    # --- Credentials ---
    def add_credential(self, user_id: int, site: str, username: str, secret: str) -> int:
        with self._write() as session:
            if session.get(User, user_id) is None:
                raise NotFound(f"User {user_id} not found")
            credential = Credential(owner_user_id=user_id, site=site, username=username, password=secret)
            session.add(credential)
            session.flush()
            credential_id = credential.id
        logger.debug("Added credential id=%s for user id=%s", credential_id, user_id)
        return credential_id

    def update_credential(self, credential_id: int, site: str, username: str, secret: str) -> None:
        with self._write() as session:
            credential = session.get(Credential, credential_id)
            if credential is None:
                raise NotFound(f"Credential {credential_id} not found")
            credential.site = site
            credential.username = username
            credential.password = secret
            session.add(credential)

    def delete_credential(self, credential_id: int) -> None:
        with self._write() as session:
            credential = session.get(Credential, credential_id)
            if credential is None:
                raise NotFound(f"Credential {credential_id} not found")
            session.delete(credential)
        logger.debug("Deleted credential id=%s", credential_id)

    def get_credential(self, credential_id: int) -> Optional[CredentialRecord]:
        with self._session() as session:
            credential = session.get(Credential, credential_id)
            return CredentialRecord.model_validate(credential) if credential else None

    def list_credentials(self, user_id: int) -> List[CredentialRecord]:
        with self._session() as session:
            statement = select(Credential).where(Credential.owner_user_id == user_id).order_by(Credential.id)
            return [CredentialRecord.model_validate(c) for c in session.exec(statement).all()]

    def count_credentials(self, user_id: int) -> int:
        with self._session() as session:
            statement = select(func.count()).select_from(Credential).where(Credential.owner_user_id == user_id)
            return session.exec(statement).one()

    def search_credentials(self, user_id: int, query: str, scope: SearchScope = SearchScope.ALL) -> List[CredentialRecord]:
        credentials = self.list_credentials(user_id)
        if not query:
            return credentials
        needle = query.lower()
        return [c for c in credentials if _matches(c, needle, scope)]
