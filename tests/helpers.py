"""Shared test scaffolding: in-memory SQLite sessions and an API client wired to them."""

import unittest
import uuid
from datetime import datetime, timezone
from unittest.mock import patch
from uuid import UUID

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, update
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_rate_limiter, get_user_cache
from app.cache.store import MemoryStore
from app.cache.user_cache import UserCache
from app.core.database import get_db
from app.core.rate_limit import FixedWindowRateLimiter
from app.core.security import generate_salt, hash_password
from app.main import app
from app.models import Base, Role, User, UserStatus

DEFAULT_PASSWORD = "correct-horse-battery"


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with all tables; one shared connection across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def insert_user(
    session_factory: sessionmaker,
    email: str,
    password: str = DEFAULT_PASSWORD,
    role: Role = Role.USER,
    status: UserStatus = UserStatus.ACTIVE,
) -> UUID:
    salt = generate_salt()
    now = datetime.now(timezone.utc)
    user_id = uuid.uuid4()
    with session_factory() as session:
        session.add(
            User(
                id=user_id,
                email=email,
                password_hash=hash_password(password, salt),
                salt=salt,
                role=int(role),
                status=int(status),
                created_at=now,
                updated_at=now,
            )
        )
        session.commit()
    return user_id


class FakeClock:
    """Monotonic stand-in advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FastHashTestCase(unittest.TestCase):
    """Lowers the bcrypt cost so hashing does not dominate test time."""

    def setUp(self) -> None:
        patcher = patch("app.core.security.BCRYPT_ROUNDS", 4)
        patcher.start()
        self.addCleanup(patcher.stop)


class ApiTestCase(FastHashTestCase):
    """TestClient over the real app with DB, user cache, and rate limiter swapped for test doubles."""

    rate_limit_requests = 1000
    rate_limit_period = 60

    def setUp(self) -> None:
        super().setUp()
        self.session_factory = make_session_factory()
        self.user_cache = UserCache(MemoryStore(), self.session_factory, ttl_seconds=60)
        self.clock = FakeClock()
        self.limiter = FixedWindowRateLimiter(
            self.rate_limit_requests, self.rate_limit_period, timer=self.clock
        )

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_user_cache] = lambda: self.user_cache
        app.dependency_overrides[get_rate_limiter] = lambda: self.limiter
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def register(self, email: str, password: str = DEFAULT_PASSWORD, **extra: str) -> UUID:
        resp = self.client.post(
            "/v1/users/register", json={"email": email, "password": password, **extra}
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return UUID(resp.json()["data"])

    def login(self, email: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
        resp = self.client.post("/v1/users/login", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        token = resp.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    def set_role(self, user_id: UUID, role: Role) -> None:
        with self.session_factory() as session:
            session.execute(update(User).where(User.id == user_id).values(role=int(role)))
            session.commit()
        self.user_cache.invalidate(user_id)

    def signup(self, email: str, role: Role = Role.USER) -> tuple[UUID, dict[str, str]]:
        """Register, optionally promote, and log in; returns (user id, auth headers)."""
        user_id = self.register(email)
        if role != Role.USER:
            self.set_role(user_id, role)
        return user_id, self.login(email)
