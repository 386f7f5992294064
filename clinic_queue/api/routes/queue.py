from fastapi import APIRouter, Depends
from typing import List

from ..deps import get_current_user, get_queue_service
from ...core.security import AuthenticatedUser
from ...services.queue_service import QueueService
from ...schemas.appointment import AppointmentResponse
from ...schemas.queue import JoinQueueRequest, JoinQueueResponse

router = APIRouter(tags=["Queue"])

@router.post("/join-queue", response_model=JoinQueueResponse)
def join_queue(
    request: JoinQueueRequest,
    queue_service: QueueService = Depends(get_queue_service),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Issue the next walk-in token for a doctor."""
    token, entry = queue_service.join_queue(
        request.doctor_id,
        request.user_id,
        request.display_name
    )
    return JoinQueueResponse(
        token=token,
        appointment=AppointmentResponse.model_validate(entry)
    )

@router.get("/queue/{doctor_id}", response_model=List[AppointmentResponse])
def get_queue(
    doctor_id: str,
    queue_service: QueueService = Depends(get_queue_service),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Waiting entries for a doctor, in call order."""
    return queue_service.get_queue(doctor_id)
