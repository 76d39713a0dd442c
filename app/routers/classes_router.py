# /app/routers/classes_router.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..core.deps import require_admin, verify_csrf
from ..models import class_model
from ..models.user_model import ActorContext, CreatedResponse, StudentOption
from ..services import class_service
from ..services.database_service import DatabaseService, get_db_service
from .outcome_handling import unwrap

router = APIRouter()

# --- CLASS COLLECTION ENDPOINTS (/api/classes) ---

@router.get("", response_model=List[class_model.ClassSummary], summary="Get All Classes with Teacher and Counts")
def get_all_classes(db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    return class_service.get_all_classes_with_summary(db=db)

@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED, summary="Create a Class",
             dependencies=[Depends(verify_csrf)])
def create_new_class(
    class_create: class_model.CreateClassRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    return CreatedResponse(id=unwrap(class_service.create_class(class_data=class_create, db=db, actor=actor)))

# --- INDIVIDUAL CLASS RESOURCE ENDPOINTS (/api/classes/{class_id}) ---

@router.get("/{class_id}", response_model=class_model.Class, summary="Get a Single Class")
def get_class_by_id(class_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    class_details = class_service.get_class(class_id=class_id, db=db)
    if class_details is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Class with ID {class_id} not found")
    return class_details

@router.patch("/{class_id}", response_model=class_model.Class, summary="Update a Class",
              dependencies=[Depends(verify_csrf)])
def update_class_details(
    class_id: int,
    class_update: class_model.UpdateClassRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    unwrap(class_service.update_class(class_id=class_id, class_update=class_update, db=db, actor=actor))
    return class_service.get_class(class_id=class_id, db=db)

@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Class",
               dependencies=[Depends(verify_csrf)])
def delete_class(class_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    unwrap(class_service.delete_class(class_id=class_id, db=db, actor=actor))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.put("/{class_id}/homeroom-teacher", response_model=class_model.Class, summary="Assign the Homeroom Teacher",
            dependencies=[Depends(verify_csrf)])
def assign_homeroom_teacher(
    class_id: int,
    request: class_model.AssignHomeroomRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    unwrap(class_service.assign_homeroom_teacher(class_id=class_id, teacher_id=request.teacher_id, db=db, actor=actor))
    return class_service.get_class(class_id=class_id, db=db)

# --- ENROLLMENT SUB-RESOURCE ENDPOINTS ---

@router.get("/{class_id}/students", response_model=List[StudentOption], summary="List Enrolled Students")
def list_class_students(class_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    return class_service.get_class_students(class_id=class_id, db=db)

@router.post("/{class_id}/students", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED,
             summary="Enroll a Student in a Class", dependencies=[Depends(verify_csrf)])
def enroll_student(
    class_id: int,
    request: class_model.EnrollStudentRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    enroll_id = unwrap(class_service.enroll_student(class_id=class_id, student_id=request.student_id, db=db, actor=actor))
    return CreatedResponse(id=enroll_id)

@router.delete("/enrollments/{enroll_id}", status_code=status.HTTP_204_NO_CONTENT,
               summary="Remove a Student from a Class", dependencies=[Depends(verify_csrf)])
def remove_enrollment(enroll_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    unwrap(class_service.remove_enrollment(enroll_id=enroll_id, db=db, actor=actor))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
