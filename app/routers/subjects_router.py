# /app/routers/subjects_router.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..core.deps import require_admin, verify_csrf
from ..models import subject_model
from ..models.user_model import ActorContext, CreatedResponse
from ..services import subject_service
from ..services.database_service import DatabaseService, get_db_service
from .outcome_handling import unwrap

router = APIRouter()


@router.get("", response_model=List[subject_model.SubjectSummary], summary="List Subjects with Their Classes")
def list_subjects(db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    return subject_service.list_subjects_with_classes(db=db)

@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED, summary="Create a Subject",
             dependencies=[Depends(verify_csrf)])
def create_subject(
    request: subject_model.CreateSubjectRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    return CreatedResponse(id=unwrap(subject_service.create_subject(request=request, db=db, actor=actor)))

@router.get("/{subject_id}", response_model=subject_model.Subject, summary="Get a Subject")
def get_subject(subject_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    subject = subject_service.get_subject(subject_id=subject_id, db=db)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Subject with ID {subject_id} not found")
    return subject

@router.patch("/{subject_id}", response_model=subject_model.Subject, summary="Rename a Subject",
              dependencies=[Depends(verify_csrf)])
def update_subject(
    subject_id: int,
    request: subject_model.UpdateSubjectRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    unwrap(subject_service.update_subject(subject_id=subject_id, request=request, db=db, actor=actor))
    return subject_service.get_subject(subject_id=subject_id, db=db)

@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an Unused Subject",
               dependencies=[Depends(verify_csrf)])
def delete_subject(subject_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    unwrap(subject_service.delete_subject(subject_id=subject_id, db=db, actor=actor))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
