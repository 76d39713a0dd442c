# /tests/test_database_service.py

from datetime import date

from sqlalchemy.exc import IntegrityError

from app.core.errors import PersistenceError
from app.models.user_model import Role


def test_add_and_get_class(db_service, session):
    """
    Tests that a class can be added inside a transaction and then retrieved.
    """
    outcome = db_service.run_in_transaction(
        lambda: db_service.add_class({"class_code": "4D", "title": "Fourth Year D"}).class_id
    )
    retrieved_class = db_service.get_class_by_id(outcome.value)
    assert retrieved_class is not None
    assert retrieved_class.title == "Fourth Year D"


def test_get_non_existent_class(db_service):
    """Tests that getting a non-existent class returns None from an empty database."""
    assert db_service.get_class_by_id(12345) is None


def test_get_all_classes(db_service):
    """
    Tests that get_all_classes returns ONLY the classes added in this test, ordered by code.
    """
    db_service.add_class({"class_code": "2B", "title": "Class 2"})
    db_service.add_class({"class_code": "1A", "title": "Class 1"})

    all_classes = db_service.get_all_classes()

    assert isinstance(all_classes, list)
    assert len(all_classes) == 2
    assert all_classes[0].title == "Class 1"
    assert all_classes[1].title == "Class 2"


def test_uncommitted_writes_roll_back_together(db_service, session):
    """
    A failure after two flushed inserts must leave neither row behind.
    """
    def _half_done():
        user = db_service.add_user("ghost_user", "hash", Role.STUDENT)
        db_service.add_student(user.user_id, "Ghost", "User", date(2011, 1, 1), "1A")
        raise IntegrityError("INSERT INTO parents", {}, Exception("constraint failed"))

    outcome = db_service.run_in_transaction(_half_done)

    assert isinstance(outcome.error, PersistenceError)
    assert db_service.existence.username_exists("ghost_user") is False
    assert db_service.get_all_students() == []


def test_existence_checker(db_service, make_class, make_subject):
    """The SQL-backed checker answers the validators' questions."""
    class_id = make_class("1A")
    subject_id = make_subject("Biology")

    assert db_service.existence.class_code_exists("1A")
    assert not db_service.existence.class_code_exists("1A", exclude_class_id=class_id)
    assert db_service.existence.class_exists(class_id)
    assert db_service.existence.subject_name_exists("BIOLOGY")
    assert db_service.existence.all_subjects_exist([subject_id, subject_id])
    assert not db_service.existence.all_subjects_exist([subject_id, 999])
    assert db_service.existence.all_students_exist([])
