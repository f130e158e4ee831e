"""Access Check — lets the front end ask "may I do this?" before showing a control.

Invariants:
    - Same decision path as the mutating endpoints (AccessService.authorize_action)
    - A denial is reported with the same status and body the real action would return
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_subject
from app.core.session_token import Subject
from app.infrastructure.database import get_db
from app.schemas.access import AccessCheckRequest, AccessCheckResponse
from app.services.access_service import AccessService

router = APIRouter(prefix="/api/v1/access", tags=["access"])


@router.post("/check", response_model=AccessCheckResponse)
async def check_access(
    body: AccessCheckRequest,
    subject: Subject = Depends(get_subject),
    db: AsyncSession = Depends(get_db),
):
    await AccessService(db).authorize_action(subject, body.action, body.resource_id)
    return AccessCheckResponse(allowed=True, action=body.action)
