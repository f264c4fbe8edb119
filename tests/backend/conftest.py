import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from backend.auth.passwords import hash_password
from backend.core import config
from backend.database import Base, create_session_factory, init_db
from backend.main import create_app
from backend.models.report import Report, ReportStatus, ReportType
from backend.models.user import Role, User


@pytest.fixture(autouse=True)
def auth_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'AUTH_SECRET', 'test-secret')
    monkeypatch.setattr(config, 'APP_ENV', 'development')


@pytest.fixture
def engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    init_db(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make_user(email: str, role: Role = Role.AZUBI, password: str = 'secret123', name: str | None = None) -> User:
        user = User(email=email, hashed_password=hash_password(password), role=role, name=name)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_report(db):
    def _make_report(
        trainee: User,
        report_date,
        status: ReportStatus = ReportStatus.ENTWURF,
        content: str = 'Worked on the warehouse inventory.',
        report_type: ReportType = ReportType.TAG,
    ) -> Report:
        report = Report(
            trainee_id=trainee.id,
            date=report_date,
            type=report_type,
            content=content,
            status=status,
        )
        db.add(report)
        db.commit()
        db.refresh(report)
        return report

    return _make_report


@pytest.fixture
def trainee(make_user) -> User:
    return make_user('azubi@example.com', Role.AZUBI, name='Anna Azubi')


@pytest.fixture
def other_trainee(make_user) -> User:
    return make_user('other@example.com', Role.AZUBI)


@pytest.fixture
def instructor(make_user) -> User:
    return make_user('ausbilder@example.com', Role.AUSBILDER, name='Max Ausbilder')


@pytest.fixture
def app(engine):
    return create_app(engine=engine)


@pytest.fixture
def make_client(app):
    clients = []

    def _make_client() -> TestClient:
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make_client
    for client in clients:
        client.close()
