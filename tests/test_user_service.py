# /tests/test_user_service.py

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from app.core import security
from app.core.errors import (
    DependencyError, FormatError, NotFoundError, PersistenceError, RequiredFieldMissing, UniquenessError,
    ValidationError,
)
from app.db.models.school_models import (
    Attendance, ClassSubject, Enrollment, Grade, GradeItem, Period, Subject
)
from app.db.models.user_models import Parent, Student, StudentParent, User
from app.models.user_model import CreateUserRequest, Role, UpdateUserRequest
from app.services import class_service, user_service


def _enrolled_with_assignment(session, db_service, admin, student, class_id, teacher):
    """Enrolls the student and gives the class one assignment; returns (enroll_id, class_subject_id)."""
    enroll_id = class_service.enroll_student(class_id, student.student_id, db_service, admin).value
    subject = Subject(name="Physics")
    session.add(subject)
    session.flush()
    assignment = ClassSubject(class_id=class_id, subject_id=subject.subject_id, teacher_id=teacher.teacher_id)
    session.add(assignment)
    session.commit()
    return enroll_id, assignment.class_subject_id


# --- Create ---

def test_create_teacher_creates_user_and_sub_record(db_service, session, admin):
    outcome = user_service.create_user(
        CreateUserRequest(username="mr_smith", password="Secret123", role_id=Role.TEACHER),
        db=db_service, actor=admin,
    )

    assert outcome
    user = session.get(User, outcome.value)
    assert user.role_id == Role.TEACHER
    assert user.pass_hash != "Secret123"
    assert security.verify_password("Secret123", user.pass_hash)
    assert db_service.get_teacher_by_user_id(user.user_id) is not None


def test_create_user_rejects_taken_username(db_service, admin, make_teacher):
    make_teacher("taken_name")

    outcome = user_service.create_user(
        CreateUserRequest(username="taken_name", password="Secret123", role_id=Role.TEACHER),
        db=db_service, actor=admin,
    )

    assert not outcome
    assert isinstance(outcome.error, UniquenessError)


def test_create_student_without_dob_leaves_no_rows(db_service, session, admin, make_class):
    """A student missing a mandatory profile field must not leave an orphan user behind."""
    make_class("1A")

    outcome = user_service.create_user(
        CreateUserRequest(
            username="no_dob", password="Secret123", role_id=Role.STUDENT,
            first_name="Ana", last_name="Novak", class_code="1A",
        ),
        db=db_service, actor=admin,
    )

    assert not outcome
    assert isinstance(outcome.error, RequiredFieldMissing)
    assert outcome.error.field == "dob"
    assert session.query(User).filter(User.username == "no_dob").count() == 0
    assert session.query(Student).count() == 0


def test_create_student_rolls_back_user_when_sub_record_insert_fails(db_service, session, admin, make_class, mocker):
    make_class("1A")
    mocker.patch.object(
        db_service, "add_student", side_effect=OperationalError("INSERT INTO students", {}, Exception("disk I/O error"))
    )

    outcome = user_service.create_user(
        CreateUserRequest(
            username="half_made", password="Secret123", role_id=Role.STUDENT,
            first_name="Ana", last_name="Novak", dob="2010-01-01", class_code="1A",
        ),
        db=db_service, actor=admin,
    )

    assert not outcome
    assert isinstance(outcome.error, PersistenceError)
    assert "disk" not in outcome.error.message
    assert session.query(User).filter(User.username == "half_made").count() == 0


def test_create_parent_links_children(db_service, session, admin, make_class, make_student):
    make_class("1A")
    first = make_student("kid_one")
    second = make_student("kid_two")

    outcome = user_service.create_user(
        CreateUserRequest(
            username="parent_one", password="Secret123", role_id=Role.PARENT,
            student_ids=[first.student_id, second.student_id, first.student_id],
        ),
        db=db_service, actor=admin,
    )

    assert outcome
    parent = db_service.get_parent_by_user_id(outcome.value)
    assert sorted(db_service.get_parent_student_ids(parent.parent_id)) == sorted([first.student_id, second.student_id])


def test_create_parent_with_unknown_child_fails(db_service, session, admin):
    outcome = user_service.create_user(
        CreateUserRequest(username="parent_x", password="Secret123", role_id=Role.PARENT, student_ids=[424242]),
        db=db_service, actor=admin,
    )

    assert not outcome
    assert isinstance(outcome.error, ValidationError)
    assert session.query(User).filter(User.username == "parent_x").count() == 0


# --- Update ---

def test_update_user_changes_only_supplied_fields(db_service, admin, make_class, make_student):
    make_class("1A")
    make_class("2B", "Second Year B")
    student = make_student("ana_n", first_name="Ana", last_name="Novak")

    outcome = user_service.update_user(
        student.user_id, UpdateUserRequest(class_code="2B"), db=db_service, actor=admin
    )

    assert outcome
    refreshed = db_service.get_student_by_user_id(student.user_id)
    assert refreshed.class_code == "2B"
    assert refreshed.first_name == "Ana"
    assert db_service.get_user_by_id(student.user_id).username == "ana_n"


def test_update_user_keeps_own_username(db_service, admin, make_teacher):
    teacher = make_teacher("same_name")

    outcome = user_service.update_user(
        teacher.user_id, UpdateUserRequest(username="same_name"), db=db_service, actor=admin
    )

    assert outcome


def test_update_user_rejects_role_change(db_service, admin, make_teacher):
    teacher = make_teacher()

    outcome = user_service.update_user(
        teacher.user_id, UpdateUserRequest(role_id=Role.PARENT), db=db_service, actor=admin
    )

    assert not outcome
    assert isinstance(outcome.error, ValidationError)
    assert db_service.get_user_by_id(teacher.user_id).role_id == Role.TEACHER


def test_update_student_rejects_bad_dob(db_service, admin, make_class, make_student):
    make_class("1A")
    student = make_student()

    outcome = user_service.update_user(
        student.user_id, UpdateUserRequest(dob="17/05/2010"), db=db_service, actor=admin
    )

    assert not outcome
    assert isinstance(outcome.error, FormatError)


def test_update_parent_replaces_all_links(db_service, session, admin, make_class, make_student):
    make_class("1A")
    first = make_student("kid_one")
    second = make_student("kid_two")
    parent_user_id = user_service.create_user(
        CreateUserRequest(username="parent_one", password="Secret123", role_id=Role.PARENT,
                          student_ids=[first.student_id]),
        db=db_service, actor=admin,
    ).value

    outcome = user_service.update_user(
        parent_user_id, UpdateUserRequest(student_ids=[second.student_id]), db=db_service, actor=admin
    )

    assert outcome
    parent = db_service.get_parent_by_user_id(parent_user_id)
    assert db_service.get_parent_student_ids(parent.parent_id) == [second.student_id]


def test_update_unknown_user_is_not_found(db_service, admin):
    outcome = user_service.update_user(999999, UpdateUserRequest(username="ghost"), db=db_service, actor=admin)

    assert not outcome
    assert isinstance(outcome.error, NotFoundError)


# --- Password Reset ---

def test_reset_password_for_unknown_user_is_falsy(db_service, admin):
    outcome = user_service.reset_password(999999, "Newpass1", db=db_service, actor=admin)

    assert not outcome
    assert isinstance(outcome.error, NotFoundError)


def test_reset_password_stores_new_hash(db_service, admin, make_teacher):
    teacher = make_teacher()

    outcome = user_service.reset_password(teacher.user_id, "Newpass1", db=db_service, actor=admin)

    assert outcome
    user = db_service.get_user_by_id(teacher.user_id)
    db_service.session.refresh(user)
    assert security.verify_password("Newpass1", user.pass_hash)


def test_reset_password_applies_policy(db_service, admin, make_teacher):
    teacher = make_teacher()

    outcome = user_service.reset_password(teacher.user_id, "short", db=db_service, actor=admin)

    assert not outcome
    assert isinstance(outcome.error, ValidationError)


# --- Guarded Delete ---

def test_homeroom_teacher_cannot_be_deleted(db_service, session, admin, make_teacher, make_class):
    teacher = make_teacher()
    class_id = make_class("1A", homeroom_teacher_id=teacher.teacher_id)

    outcome = user_service.delete_user(teacher.user_id, db=db_service, actor=admin)

    assert not outcome
    assert isinstance(outcome.error, DependencyError)
    assert "homeroom" in outcome.error.message
    assert db_service.get_user_by_id(teacher.user_id) is not None
    assert db_service.get_class_by_id(class_id).homeroom_teacher_id == teacher.teacher_id


def test_teacher_with_assignment_cannot_be_deleted(db_service, session, admin, make_teacher, make_class, make_subject):
    teacher = make_teacher()
    class_id = make_class("1A")
    subject_id = make_subject("Chemistry")
    session.add(ClassSubject(class_id=class_id, subject_id=subject_id, teacher_id=teacher.teacher_id))
    session.commit()

    outcome = user_service.delete_user(teacher.user_id, db=db_service, actor=admin)

    assert not outcome
    assert outcome.error.dependency == "class_subjects"


def test_unreferenced_teacher_is_deleted_with_sub_record(db_service, admin, make_teacher):
    teacher = make_teacher()
    user_id = teacher.user_id

    outcome = user_service.delete_user(user_id, db=db_service, actor=admin)

    assert outcome
    assert db_service.get_user_by_id(user_id) is None
    assert db_service.get_teacher_by_user_id(user_id) is None


def test_student_with_grades_cannot_be_deleted(db_service, session, admin, make_teacher, make_class, make_student):
    teacher = make_teacher()
    class_id = make_class("1A")
    student = make_student()
    enroll_id, class_subject_id = _enrolled_with_assignment(session, db_service, admin, student, class_id, teacher)
    item = GradeItem(class_subject_id=class_subject_id, name="Test 1", max_points=Decimal("20"))
    session.add(item)
    session.flush()
    session.add(Grade(enroll_id=enroll_id, item_id=item.item_id, points=Decimal("17")))
    session.commit()

    outcome = user_service.delete_user(student.user_id, db=db_service, actor=admin)

    assert not outcome
    assert outcome.error.dependency == "grades"
    assert session.query(Enrollment).filter(Enrollment.enroll_id == enroll_id).count() == 1


def test_student_with_attendance_cannot_be_deleted(db_service, session, admin, make_teacher, make_class, make_student):
    teacher = make_teacher()
    class_id = make_class("1A")
    student = make_student()
    enroll_id, class_subject_id = _enrolled_with_assignment(session, db_service, admin, student, class_id, teacher)
    period = Period(class_subject_id=class_subject_id, period_date=date(2024, 3, 4), period_label="1st")
    session.add(period)
    session.flush()
    session.add(Attendance(enroll_id=enroll_id, period_id=period.period_id, status="A"))
    session.commit()

    outcome = user_service.delete_user(student.user_id, db=db_service, actor=admin)

    assert not outcome
    assert outcome.error.dependency == "attendance"


def test_student_delete_removes_enrollments_and_parent_links(db_service, session, admin, make_class, make_student):
    class_id = make_class("1A")
    student = make_student()
    class_service.enroll_student(class_id, student.student_id, db_service, admin)
    user_service.create_user(
        CreateUserRequest(username="parent_one", password="Secret123", role_id=Role.PARENT,
                          student_ids=[student.student_id]),
        db=db_service, actor=admin,
    )
    student_id = student.student_id

    outcome = user_service.delete_user(student.user_id, db=db_service, actor=admin)

    assert outcome
    assert session.query(Enrollment).filter(Enrollment.student_id == student_id).count() == 0
    assert session.query(StudentParent).filter(StudentParent.student_id == student_id).count() == 0
    assert session.query(Parent).count() == 1


def test_parent_delete_removes_links_but_keeps_students(db_service, session, admin, make_class, make_student):
    make_class("1A")
    student = make_student()
    parent_user_id = user_service.create_user(
        CreateUserRequest(username="parent_one", password="Secret123", role_id=Role.PARENT,
                          student_ids=[student.student_id]),
        db=db_service, actor=admin,
    ).value

    outcome = user_service.delete_user(parent_user_id, db=db_service, actor=admin)

    assert outcome
    assert session.query(StudentParent).count() == 0
    assert session.query(Parent).count() == 0
    assert session.query(Student).count() == 1


def test_admin_cannot_delete_own_account(db_service, admin):
    outcome = user_service.delete_user(admin.user_id, db=db_service, actor=admin)

    assert not outcome
    assert isinstance(outcome.error, DependencyError)
    assert db_service.get_user_by_id(admin.user_id) is not None


def test_delete_unknown_user_is_not_found(db_service, admin):
    outcome = user_service.delete_user(999999, db=db_service, actor=admin)

    assert not outcome
    assert isinstance(outcome.error, NotFoundError)


# --- Reads ---

def test_list_users_filters_by_role_and_carries_student_names(db_service, admin, make_teacher, make_class, make_student):
    make_teacher("teach_a")
    make_class("1A")
    make_student("stud_a", first_name="Ivo", last_name="Horvat")

    students = user_service.list_users(db_service, role_id=Role.STUDENT)
    everyone = user_service.list_users(db_service)

    assert [s.username for s in students] == ["stud_a"]
    assert students[0].role_name == "Student"
    assert students[0].last_name == "Horvat"
    assert {u.username for u in everyone} == {"admin", "teach_a", "stud_a"}


def test_get_user_details_for_teacher(db_service, admin, make_teacher, make_class):
    teacher = make_teacher()
    make_class("1A", "First Year A", homeroom_teacher_id=teacher.teacher_id)

    details = user_service.get_user_details(teacher.user_id, db_service)

    assert details.role_name == "Teacher"
    assert details.teacher_id == teacher.teacher_id
    assert [c.class_code for c in details.homeroom_classes] == ["1A"]
    assert details.assignments == []


def test_get_user_details_unknown_user_is_none(db_service):
    assert user_service.get_user_details(999999, db_service) is None


@pytest.mark.parametrize("search, expected", [(None, 2), ("hor", 1), ("zzz", 0)])
def test_list_students_search(db_service, admin, make_class, make_student, search, expected):
    make_class("1A")
    make_student("s_one", first_name="Ivo", last_name="Horvat")
    make_student("s_two", first_name="Ana", last_name="Novak")

    assert len(user_service.list_students(db_service, search=search)) == expected
