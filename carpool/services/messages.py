"""Append-only per-trip chat between two users."""

from __future__ import annotations

import logging

from carpool.domain.errors import NotFound, ValidationError
from carpool.infrastructure.models import MessageModel
from carpool.infrastructure.repositories import (
    MessageRepository,
    TripRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(
        self,
        messages: MessageRepository,
        trips: TripRepository,
        users: UserRepository,
    ):
        self.messages = messages
        self.trips = trips
        self.users = users

    async def send(
        self, sender_id: int, trip_id: int, receiver_id: int, content: str | None
    ) -> MessageModel:
        if not trip_id or not receiver_id or not (content or "").strip():
            raise ValidationError("tripId, receiverId y content son requeridos")
        if await self.trips.get_by_id(trip_id) is None:
            raise NotFound("Viaje no encontrado")
        if await self.users.get_by_id(receiver_id) is None:
            raise NotFound("Usuario receptor no encontrado")

        message = await self.messages.create(
            trip_id=trip_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content.strip(),
        )
        logger.debug("Message %d sent on trip %d", message.id, trip_id)
        return message

    async def list_conversation(
        self, user_id: int, trip_id: int, other_user_id: int
    ) -> list[MessageModel]:
        if await self.trips.get_by_id(trip_id) is None:
            raise NotFound("Viaje no encontrado")
        return await self.messages.list_between(trip_id, user_id, other_user_id)
