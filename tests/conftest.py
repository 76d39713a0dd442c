# /tests/conftest.py

import pytest
from passlib.context import CryptContext
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.database import enable_sqlite_foreign_keys
from app.db.models.user_models import Role as RoleRecord, User
from app.models.class_model import CreateClassRequest
from app.models.subject_model import CreateSubjectRequest
from app.models.user_model import ActorContext, CreateUserRequest, Role
from app.services import class_service, subject_service, user_service
from app.services.database_service import DatabaseService

# --- Database Fixtures ---

@pytest.fixture
def engine():
    """A fresh in-memory SQLite database with foreign keys enforced, per test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    Base.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    db.add_all([
        RoleRecord(role_id=Role.ADMIN, name="Administrator"),
        RoleRecord(role_id=Role.TEACHER, name="Teacher"),
        RoleRecord(role_id=Role.STUDENT, name="Student"),
        RoleRecord(role_id=Role.PARENT, name="Parent"),
    ])
    db.commit()
    yield db
    db.close()


@pytest.fixture
def db_service(session):
    return DatabaseService(db_session=session)


@pytest.fixture(autouse=True)
def fast_password_hashing(mocker):
    """bcrypt at its lowest cost factor, so user-heavy tests stay quick."""
    mocker.patch(
        "app.core.security.pwd_context",
        CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=4),
    )


@pytest.fixture
def admin(session):
    """The signed-in administrator every service call runs on behalf of."""
    admin_user = User(username="admin", pass_hash="not-a-real-hash", role_id=Role.ADMIN)
    session.add(admin_user)
    session.commit()
    return ActorContext(user_id=admin_user.user_id, role=Role.ADMIN)


# --- Entity Factories ---

@pytest.fixture
def make_teacher(db_service, admin):
    def _make(username="teacher_one"):
        outcome = user_service.create_user(
            CreateUserRequest(username=username, password="Secret123", role_id=Role.TEACHER),
            db=db_service, actor=admin,
        )
        assert outcome, outcome
        return db_service.get_teacher_by_user_id(outcome.value)
    return _make


@pytest.fixture
def make_class(db_service, admin):
    def _make(class_code="1A", title="First Year A", homeroom_teacher_id=None):
        outcome = class_service.create_class(
            CreateClassRequest(class_code=class_code, title=title, homeroom_teacher_id=homeroom_teacher_id),
            db=db_service, actor=admin,
        )
        assert outcome, outcome
        return outcome.value
    return _make


@pytest.fixture
def make_student(db_service, admin):
    def _make(username="student_one", class_code="1A", first_name="Ana", last_name="Novak"):
        outcome = user_service.create_user(
            CreateUserRequest(
                username=username, password="Secret123", role_id=Role.STUDENT,
                first_name=first_name, last_name=last_name, dob="2010-05-17", class_code=class_code,
            ),
            db=db_service, actor=admin,
        )
        assert outcome, outcome
        return db_service.get_student_by_user_id(outcome.value)
    return _make


@pytest.fixture
def make_subject(db_service, admin):
    def _make(name="Mathematics"):
        outcome = subject_service.create_subject(CreateSubjectRequest(name=name), db=db_service, actor=admin)
        assert outcome, outcome
        return outcome.value
    return _make
