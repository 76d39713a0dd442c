# /app/routers/security_router.py

from fastapi import APIRouter, Depends

from ..core import security
from ..core.deps import require_admin
from ..models.user_model import ActorContext

router = APIRouter()


@router.get("/csrf-token", summary="Issue a CSRF Token for the Next Form Submission")
def issue_csrf_token(actor: ActorContext = Depends(require_admin)):
    return {"csrf_token": security.generate_token()}
