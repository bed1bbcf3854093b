import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from backend.core.config import Settings
from backend.database import init_db
from backend.main import create_app


TEST_SECRET = 'test-secret-key'


class BrokenSession:
    """Session stand-in whose every round trip fails like a dropped connection."""

    def add(self, _instance) -> None:
        pass

    def commit(self) -> None:
        raise OperationalError('INSERT INTO test_results ...', {}, Exception('connection lost'))

    def rollback(self) -> None:
        pass

    def query(self, *_entities):
        raise OperationalError('SELECT * FROM test_results ...', {}, Exception('connection lost'))

    def close(self) -> None:
        pass


@pytest.fixture
def broken_session() -> BrokenSession:
    return BrokenSession()


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url='sqlite://', jwt_secret_key=TEST_SECRET)


@pytest.fixture
def app(settings: Settings):
    application = create_app(settings)
    init_db(application.state.engine)
    try:
        yield application
    finally:
        application.state.engine.dispose()


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_and_login(client):
    def _register_and_login(email: str = 'a@x.com', password: str = 'pw123456', name: str = 'Alice') -> dict:
        register_response = client.post(
            '/api/auth/register',
            json={'email': email, 'password': password, 'name': name},
        )
        assert register_response.status_code == 201

        login_response = client.post('/api/auth/login', json={'email': email, 'password': password})
        assert login_response.status_code == 200
        return login_response.json()

    return _register_and_login
