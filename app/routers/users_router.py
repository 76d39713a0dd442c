# /app/routers/users_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..core.deps import require_admin, verify_csrf
from ..models import user_model
from ..models.user_model import ActorContext
from ..services import user_service
from ..services.database_service import DatabaseService, get_db_service
from .outcome_handling import unwrap

router = APIRouter()

# --- USER COLLECTION ENDPOINTS (/api/users) ---

@router.get("", response_model=List[user_model.UserListItem], summary="List Users, Optionally Filtered by Role")
def list_users(
    role_id: Optional[int] = None,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    return user_service.list_users(db=db, role_id=role_id)

@router.post("", response_model=user_model.CreatedResponse, status_code=status.HTTP_201_CREATED,
             summary="Create a User with Its Role Profile", dependencies=[Depends(verify_csrf)])
def create_user(
    request: user_model.CreateUserRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    user_id = unwrap(user_service.create_user(request=request, db=db, actor=actor))
    return user_model.CreatedResponse(id=user_id)

@router.get("/teachers", response_model=List[user_model.TeacherOption], summary="List Teachers")
def list_teachers(db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    return user_service.list_teachers(db=db)

@router.get("/students", response_model=List[user_model.StudentOption], summary="List Students")
def list_students(
    search: Optional[str] = None,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    return user_service.list_students(db=db, search=search)

# --- INDIVIDUAL USER ENDPOINTS (/api/users/{user_id}) ---

@router.get("/{user_id}", response_model=user_model.UserDetails, summary="Get a User with Role Details")
def get_user(user_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    details = user_service.get_user_details(user_id=user_id, db=db)
    if details is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with ID {user_id} not found")
    return details

@router.patch("/{user_id}", response_model=user_model.UserDetails, summary="Update a User",
              dependencies=[Depends(verify_csrf)])
def update_user(
    user_id: int,
    request: user_model.UpdateUserRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    unwrap(user_service.update_user(user_id=user_id, request=request, db=db, actor=actor))
    return user_service.get_user_details(user_id=user_id, db=db)

@router.post("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT, summary="Reset a User's Password",
             dependencies=[Depends(verify_csrf)])
def reset_password(
    user_id: int,
    request: user_model.ResetPasswordRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    unwrap(user_service.reset_password(user_id=user_id, new_password=request.new_password, db=db, actor=actor))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a User",
               dependencies=[Depends(verify_csrf)])
def delete_user(user_id: int, db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    unwrap(user_service.delete_user(user_id=user_id, db=db, actor=actor))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
