# /app/routers/assignments_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..core.deps import require_admin, verify_csrf
from ..models import assignment_model
from ..models.user_model import ActorContext, CreatedResponse
from ..services import assignment_service
from ..services.database_service import DatabaseService, get_db_service
from .outcome_handling import unwrap

router = APIRouter()


@router.get("", response_model=List[assignment_model.AssignmentDetails], summary="List Class-Subject Assignments")
def list_assignments(
    class_id: Optional[int] = None,
    teacher_id: Optional[int] = None,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    return assignment_service.list_assignments(db=db, class_id=class_id, teacher_id=teacher_id)

@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED,
             summary="Assign a Subject and Teacher to a Class", dependencies=[Depends(verify_csrf)])
def create_assignment(
    request: assignment_model.CreateAssignmentRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    return CreatedResponse(id=unwrap(assignment_service.create_assignment(request=request, db=db, actor=actor)))

@router.get("/{class_subject_id}", response_model=assignment_model.AssignmentDetails, summary="Get an Assignment")
def get_assignment(class_subject_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    details = assignment_service.get_assignment(class_subject_id=class_subject_id, db=db)
    if details is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Assignment with ID {class_subject_id} not found")
    return details

@router.patch("/{class_subject_id}", response_model=assignment_model.AssignmentDetails,
              summary="Change the Teacher or Schedule of an Assignment", dependencies=[Depends(verify_csrf)])
def update_assignment(
    class_subject_id: int,
    request: assignment_model.UpdateAssignmentRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    unwrap(assignment_service.update_assignment(class_subject_id=class_subject_id, request=request, db=db, actor=actor))
    return assignment_service.get_assignment(class_subject_id=class_subject_id, db=db)

@router.delete("/{class_subject_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove an Assignment",
               dependencies=[Depends(verify_csrf)])
def delete_assignment(class_subject_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    unwrap(assignment_service.delete_assignment(class_subject_id=class_subject_id, db=db, actor=actor))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
