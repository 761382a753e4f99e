"""Per-trip conversations between two users."""

import pytest
import pytest_asyncio

from carpool.domain.errors import NotFound, ValidationError
from carpool.infrastructure.repositories import (
    MessageRepository,
    TripRepository,
    UserRepository,
)
from carpool.services.messages import MessageService


@pytest_asyncio.fixture
async def service(db_session) -> MessageService:
    return MessageService(
        MessageRepository(db_session),
        TripRepository(db_session),
        UserRepository(db_session),
    )


@pytest_asyncio.fixture
async def chat(factory):
    driver, passenger = await factory.user(), await factory.user()
    trip = await factory.trip(driver)
    return driver, passenger, trip


class TestSend:
    @pytest.mark.asyncio
    async def test_stores_unread_trimmed_message(self, service, chat):
        driver, passenger, trip = chat
        message = await service.send(passenger.id, trip.id, driver.id, "  ¿Paras en Girardota?  ")

        assert message.id is not None
        assert message.content == "¿Paras en Girardota?"
        assert message.read is False
        assert message.sender_id == passenger.id
        assert message.receiver_id == driver.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_content_required(self, service, chat, content):
        driver, passenger, trip = chat
        with pytest.raises(ValidationError, match="requeridos"):
            await service.send(passenger.id, trip.id, driver.id, content)

    @pytest.mark.asyncio
    async def test_ids_required(self, service, chat):
        driver, passenger, trip = chat
        with pytest.raises(ValidationError):
            await service.send(passenger.id, None, driver.id, "hola")
        with pytest.raises(ValidationError):
            await service.send(passenger.id, trip.id, None, "hola")

    @pytest.mark.asyncio
    async def test_unknown_trip(self, service, chat):
        driver, passenger, _ = chat
        with pytest.raises(NotFound, match="Viaje"):
            await service.send(passenger.id, 999, driver.id, "hola")

    @pytest.mark.asyncio
    async def test_unknown_receiver(self, service, chat):
        _, passenger, trip = chat
        with pytest.raises(NotFound, match="receptor"):
            await service.send(passenger.id, trip.id, 999, "hola")


class TestConversation:
    @pytest.mark.asyncio
    async def test_both_directions_in_order(self, service, chat, factory):
        driver, passenger, trip = chat
        outsider = await factory.user()
        first = await service.send(passenger.id, trip.id, driver.id, "Hola")
        second = await service.send(driver.id, trip.id, passenger.id, "Hola, ¿dónde te recojo?")
        await service.send(outsider.id, trip.id, driver.id, "Otra conversación")

        from_passenger = await service.list_conversation(passenger.id, trip.id, driver.id)
        from_driver = await service.list_conversation(driver.id, trip.id, passenger.id)

        assert [m.id for m in from_passenger] == [first.id, second.id]
        assert [m.id for m in from_driver] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_scoped_to_trip(self, service, chat, factory):
        driver, passenger, trip = chat
        other_trip = await factory.trip(driver)
        await service.send(passenger.id, other_trip.id, driver.id, "Otro viaje")

        assert await service.list_conversation(passenger.id, trip.id, driver.id) == []

    @pytest.mark.asyncio
    async def test_unknown_trip(self, service, chat):
        driver, passenger, _ = chat
        with pytest.raises(NotFound):
            await service.list_conversation(passenger.id, 999, driver.id)
