"""Shared test fixtures for the IssueLane test suite.

Provides:
- logger: StructuredLogger writing to a temporary log file
- fake_supabase: in-memory stand-in for the Supabase client (tables,
  auth and storage) that records every call
- db: DatabaseManager over an in-memory SQLite file with the schema applied
- notifier: RecordingNotifier capturing user-visible messages
- profile / seed_user: a signed-up user with an assignment
"""

from __future__ import annotations

import copy
import itertools
from types import SimpleNamespace

import pytest

from issuelane.auth import SessionManager
from issuelane.config import AppConfig
from issuelane.database import DatabaseManager
from issuelane.logger import StructuredLogger
from issuelane.models.user import Assignment, Designation, Role, UserProfile
from issuelane.repositories.file_repository import FileRepository
from issuelane.repositories.ticket_repository import TicketRepository
from issuelane.repositories.user_repository import UserRepository
from issuelane.schema import initialize_schema
from issuelane.services.auth_service import AuthService
from issuelane.services.local_storage import LocalStorageService
from issuelane.services.profile_cache import ProfileCacheService
from issuelane.services.session_cache import SessionCacheService
from issuelane.services.ticket_service import TicketService


AUTH_USER_ID = "0b7e6f3a-1111-4c2d-9e55-3f1a2b3c4d5e"


# ─── Fake Supabase client ──────────────────────────────────

_PRIMARY_KEYS = {"tickets": "ticket_id", "files": "file_id", "users": "user_id"}


class FakeQuery:
    """Chainable PostgREST query builder over ``FakeSupabase.tables``."""

    def __init__(self, client: "FakeSupabase", table: str) -> None:
        self._client = client
        self._table = table
        self._action = "select"
        self._columns = "*"
        self._payload: dict | None = None
        self._filters: list[tuple[str, object]] = []
        self._single = False
        self._limit: int | None = None

    def select(self, columns: str = "*") -> "FakeQuery":
        self._columns = columns
        return self

    def insert(self, payload: dict) -> "FakeQuery":
        self._action, self._payload = "insert", dict(payload)
        return self

    def update(self, payload: dict) -> "FakeQuery":
        self._action, self._payload = "update", dict(payload)
        return self

    def delete(self) -> "FakeQuery":
        self._action = "delete"
        return self

    def eq(self, column: str, value: object) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def maybe_single(self) -> "FakeQuery":
        self._single = True
        return self

    def single(self) -> "FakeQuery":
        self._single = True
        return self

    def execute(self) -> SimpleNamespace:
        self._client.calls.append(
            (self._table, self._action, self._payload, tuple(self._filters))
        )
        failure = self._client.failures.get((self._table, self._action))
        if failure is not None:
            raise failure

        rows = self._client.tables.setdefault(self._table, [])
        matching = [r for r in rows if all(r.get(c) == v for c, v in self._filters)]

        if self._action == "insert":
            pk = _PRIMARY_KEYS.get(self._table, "id")
            row = {pk: next(self._client.sequences[self._table]), **self._payload}
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])
        if self._action == "update":
            for row in matching:
                row.update(self._payload)
            return SimpleNamespace(data=copy.deepcopy(matching))
        if self._action == "delete":
            self._client.tables[self._table] = [r for r in rows if r not in matching]
            return SimpleNamespace(data=copy.deepcopy(matching))

        if self._limit is not None:
            matching = matching[: self._limit]
        if self._single:
            return SimpleNamespace(data=copy.deepcopy(matching[0]) if matching else None)
        return SimpleNamespace(data=copy.deepcopy(matching))


class FakeAuth:
    """``client.auth`` with scripted sign-in / refresh outcomes."""

    def __init__(self) -> None:
        self.sign_in_result: object = None
        self.sign_in_error: Exception | None = None
        self.sign_out_error: Exception | None = None
        self.refresh_error: Exception | None = None
        self.sign_in_calls: list[dict] = []
        self.sign_out_calls = 0
        self.refresh_calls: list[str] = []

    def sign_in_with_password(self, credentials: dict) -> object:
        self.sign_in_calls.append(credentials)
        if self.sign_in_error is not None:
            raise self.sign_in_error
        return self.sign_in_result

    def sign_out(self) -> None:
        self.sign_out_calls += 1
        if self.sign_out_error is not None:
            raise self.sign_out_error

    def refresh_session(self, refresh_token: str) -> object:
        self.refresh_calls.append(refresh_token)
        if self.refresh_error is not None:
            raise self.refresh_error
        return auth_response(refresh_token=f"{refresh_token}-rotated")


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str) -> None:
        self._storage = storage
        self._name = name

    def upload(self, path: str, content: bytes, options: dict | None = None) -> None:
        if self._storage.upload_error is not None:
            raise self._storage.upload_error
        self._storage.objects[f"{self._name}/{path}"] = content

    def get_public_url(self, path: str) -> str:
        return f"https://cdn.example.test/{self._name}/{path}"

    def remove(self, paths: list[str]) -> None:
        for path in paths:
            self._storage.objects.pop(f"{self._name}/{path}", None)
            self._storage.removed.append(path)


class FakeStorage:
    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.removed: list[str] = []
        self.upload_error: Exception | None = None

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeSupabase:
    """Minimal in-memory Supabase client.

    ``failures[(table, action)] = exc`` makes the matching ``execute()``
    raise *exc*.  Every table call is appended to ``calls``.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict]] = {}
        self.failures: dict[tuple[str, str], Exception] = {}
        self.calls: list[tuple] = []
        self.sequences = {
            "tickets": itertools.count(2043),
            "files": itertools.count(1),
            "users": itertools.count(100),
        }
        self.auth = FakeAuth()
        self.storage = FakeStorage()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def calls_to(self, table: str, action: str | None = None) -> list[tuple]:
        return [c for c in self.calls if c[0] == table and (action is None or c[1] == action)]


def auth_response(
    user_id: str | None = AUTH_USER_ID,
    email: str = "sarah.chen@example.com",
    refresh_token: str = "refresh-1",
) -> SimpleNamespace:
    """Shape of ``gotrue`` ``AuthResponse`` used by the auth service."""
    user = SimpleNamespace(id=user_id, email=email) if user_id is not None else None
    session = SimpleNamespace(
        access_token="access-1",
        refresh_token=refresh_token,
        expires_at=4_102_444_800,  # 2100-01-01
    )
    return SimpleNamespace(user=user, session=session)


class RecordingNotifier:
    """Notifier that keeps every message as ``(level, message, id)``."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str, str | None]] = []

    def loading(self, message, *, id=None):
        self.messages.append(("loading", message, id))

    def success(self, message, *, id=None):
        self.messages.append(("success", message, id))

    def warning(self, message, *, id=None):
        self.messages.append(("warning", message, id))

    def error(self, message, *, id=None):
        self.messages.append(("error", message, id))

    def of(self, level: str) -> list[str]:
        return [m for lvl, m, _ in self.messages if lvl == level]


# ─── Fixtures ──────────────────────────────────────────────

@pytest.fixture(scope="session")
def logger(tmp_path_factory):
    log_file = tmp_path_factory.mktemp("logs") / "issuelane-test.log"
    return StructuredLogger(name="issuelane.tests", log_file=str(log_file))


@pytest.fixture
def config():
    return AppConfig(SUPABASE_URL="", PLACEHOLDER_ASSIGNEE_ID=1, MAX_ATTACHMENT_BYTES=1024)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def db(fake_supabase, logger):
    manager = DatabaseManager(
        supabase_url="",
        supabase_key="",
        sqlite_path=":memory:",
        logger=logger,
        supabase_client=fake_supabase,
    )
    initialize_schema(manager.sqlite, logger)
    yield manager
    manager.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def local_storage(db, logger):
    return LocalStorageService(db=db, logger=logger)


@pytest.fixture
def profile_cache(local_storage, logger):
    return ProfileCacheService(storage=local_storage, logger=logger)


@pytest.fixture
def user_repo(db, logger):
    return UserRepository(db=db, logger=logger)


@pytest.fixture
def session_cache(db, logger, tmp_path):
    return SessionCacheService(
        db=db,
        logger=logger,
        max_age_days=30,
        salt_path=tmp_path / "salt",
        kdf_iterations=1_000,
    )


@pytest.fixture
def session():
    return SessionManager()


@pytest.fixture
def auth_service(db, session, user_repo, profile_cache, local_storage, session_cache, notifier, logger):
    return AuthService(
        db=db,
        session=session,
        user_repo=user_repo,
        profile_cache=profile_cache,
        local_storage=local_storage,
        session_cache=session_cache,
        notifier=notifier,
        logger=logger,
    )


@pytest.fixture
def ticket_service(db, profile_cache, notifier, config, logger):
    return TicketService(
        ticket_repo=TicketRepository(db=db, logger=logger),
        file_repo=FileRepository(db=db, logger=logger, bucket=config.STORAGE_BUCKET),
        profile_cache=profile_cache,
        notifier=notifier,
        config=config,
        logger=logger,
    )


@pytest.fixture
def seed_user(fake_supabase):
    """A ``users`` row and its assignment in the fake backend."""
    user_row = {
        "user_id": 7,
        "auth_user_id": AUTH_USER_ID,
        "username": "schen",
        "first_name": "Sarah",
        "middle_name": None,
        "last_name": "Chen",
        "email": "sarah.chen@example.com",
        "birthday": None,
        "sex": None,
        "mobile_number": None,
        "address": None,
        "created_at": "2024-01-15T09:00:00+00:00",
    }
    assignment_row = {
        "user_id": 7,
        "role_id": 2,
        "designation_id": 3,
        "role": {"name": "Agent"},
        "designation": {"name": "IT Support"},
    }
    fake_supabase.tables["users"] = [user_row]
    fake_supabase.tables["user_assignments"] = [assignment_row]
    return user_row


@pytest.fixture
def profile():
    return UserProfile(
        user_id=7,
        auth_user_id=AUTH_USER_ID,
        username="schen",
        first_name="Sarah",
        last_name="Chen",
        email="sarah.chen@example.com",
        assignment=Assignment(
            role_id=2,
            designation_id=3,
            role=Role(name="Agent"),
            designation=Designation(name="IT Support"),
        ),
    )
