import os

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.core.errors import UploadError  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.main import app  # noqa: E402
from backend.models import issue as issue_models, user as user_models  # noqa: E402,F401
from backend.notifications.dispatcher import NotificationDispatcher, get_notification_dispatcher  # noqa: E402
from backend.services.image_uploader import get_image_uploader  # noqa: E402


class FakeUploader:
    def __init__(self, url: str = 'https://res.cloudinary.com/demo/image/upload/campus-fixit/photo.jpg'):
        self.url = url
        self.uploads: list[tuple[bytes, str | None]] = []
        self.fail = False

    def upload(self, data: bytes, filename: str | None = None) -> str:
        if self.fail:
            raise UploadError()
        self.uploads.append((data, filename))
        return self.url


class RecordingSender:
    def __init__(self, configured: bool = True, fail: bool = False):
        self.configured = configured
        self.fail = fail
        self.sent: list[dict] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def send(self, to_email, subject, html, text=None):
        if self.fail:
            raise ConnectionError('SMTP server unreachable')
        self.sent.append({'to': to_email, 'subject': subject, 'html': html, 'text': text})


@pytest.fixture
def engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
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
def uploader():
    return FakeUploader()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def dispatcher(sender):
    return NotificationDispatcher(sender)


@pytest.fixture
def client(session_factory, uploader, dispatcher):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_uploader] = lambda: uploader
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def register_user(client, name, email, password='secret1', role=None) -> dict:
    payload = {'name': name, 'email': email, 'password': password}
    if role:
        payload['role'] = role
    response = client.post('/api/auth/register', json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def auth_header(token: str) -> dict:
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def student(client):
    return register_user(client, 'Alice', 'alice@x.edu')


@pytest.fixture
def other_student(client):
    return register_user(client, 'Bob', 'bob@x.edu')


@pytest.fixture
def admin(client):
    return register_user(client, 'Facilities Admin', 'admin@x.edu', role='admin')
