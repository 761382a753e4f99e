"""
Message endpoints
=================

POST /api/messages                          -- send a message on a trip (201)
GET  /api/messages/{trip_id}/{other_user_id} -- conversation with one user
"""

from fastapi import APIRouter, Depends, Request

from carpool.api.dependencies import get_current_user_id, get_message_service
from carpool.api.middleware import limiter
from carpool.api.schemas import ApiResponse, MessageCreateRequest, MessageResponse
from carpool.config import settings
from carpool.services.messages import MessageService

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[MessageResponse],
    summary="Send a message",
)
@limiter.limit(settings.rate_limit)
async def send_message(
    request: Request,
    body: MessageCreateRequest,
    user_id: int = Depends(get_current_user_id),
    service: MessageService = Depends(get_message_service),
):
    message = await service.send(user_id, body.trip_id, body.receiver_id, body.content)
    return ApiResponse(
        message="Mensaje enviado", data=MessageResponse.model_validate(message)
    )


@router.get(
    "/{trip_id}/{other_user_id}",
    response_model=ApiResponse[list[MessageResponse]],
    summary="Messages exchanged with another user on a trip",
)
@limiter.limit(settings.rate_limit)
async def list_messages(
    request: Request,
    trip_id: int,
    other_user_id: int,
    user_id: int = Depends(get_current_user_id),
    service: MessageService = Depends(get_message_service),
):
    messages = await service.list_conversation(user_id, trip_id, other_user_id)
    return ApiResponse(data=[MessageResponse.model_validate(m) for m in messages])
