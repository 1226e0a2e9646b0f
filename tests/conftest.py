import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.db import models  # noqa: F401  registers tables
from app.db.crud import site as site_crud
from app.db.crud import user as user_crud
from app.db.models.shift import Shift
from app.db.schemas.location import LocationSampleIn
from app.db.schemas.site import SiteCreate
from app.db.schemas.user import UserCreate
from app.main import create_app
from app.services.notifier import Notifier


class RecordingNotifier(Notifier):
    """Keeps every event instead of sending it."""

    def __init__(self):
        self.dashboard_events = []
        self.user_events = []

    def broadcast_to_dashboards(self, event, payload=None):
        self.dashboard_events.append((event, payload))

    def send_to_user(self, user_id, event, payload=None):
        self.user_events.append((user_id, event, payload))

    def dashboard_event_names(self):
        return [name for name, _ in self.dashboard_events]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app(session_factory, notifier):
    app = create_app(notifier=notifier, init_database=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_guard(db):
    def _make(name="Juan Dela Cruz", role="guard"):
        return user_crud.create_user(db, UserCreate(
            name=name,
            email=f"{uuid.uuid4().hex[:10]}@example.com",
            role=role,
        ))
    return _make


@pytest.fixture
def make_site(db):
    def _make(name="Harbor Gate", lat=14.6, lng=121.0, lat_to=None, lng_to=None, buffer_meters=100):
        return site_crud.create_site(db, SiteCreate(
            name=name,
            lat_from=lat,
            lng_from=lng,
            lat_to=lat if lat_to is None else lat_to,
            lng_to=lng if lng_to is None else lng_to,
            buffer_meters=buffer_meters,
        ))
    return _make


@pytest.fixture
def make_shift(db):
    def _make(guard, site=None, status="active", start_time=None):
        shift = Shift(
            guard_id=guard.id,
            site_id=site.id if site else None,
            status=status,
            start_time=start_time or datetime(2026, 3, 1, 8, 0, 0),
        )
        db.add(shift)
        db.commit()
        db.refresh(shift)
        return shift
    return _make


def samples_at(points, start=datetime(2026, 3, 1, 9, 0, 0), step=timedelta(seconds=40)):
    """LocationSampleIn list for (lat, lng) points spaced ``step`` apart."""
    return [
        LocationSampleIn(latitude=lat, longitude=lng, recorded_at=start + step * i)
        for i, (lat, lng) in enumerate(points)
    ]
