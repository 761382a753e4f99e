"""Accounts, tokens and profile pictures."""

from datetime import timedelta

import pytest
import pytest_asyncio

from carpool.domain.errors import Conflict, NotFound, Unauthenticated, ValidationError
from carpool.infrastructure.repositories import UserRepository
from carpool.infrastructure.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from carpool.infrastructure.storage import ProfilePictureStorage
from carpool.services.users import UserService


@pytest_asyncio.fixture
async def service(db_session) -> UserService:
    return UserService(UserRepository(db_session))


class TestSecurity:
    def test_password_hash_round_trip(self):
        hashed = hash_password("password123")
        assert hashed != "password123"
        assert verify_password("password123", hashed)
        assert not verify_password("password124", hashed)

    def test_token_carries_user_id(self):
        assert decode_access_token(create_access_token(42, "a@example.com")) == 42

    def test_expired_token(self):
        token = create_access_token(1, "a@example.com", timedelta(seconds=-10))
        with pytest.raises(Unauthenticated, match="expirado"):
            decode_access_token(token)

    def test_garbage_token(self):
        with pytest.raises(Unauthenticated, match="inválido"):
            decode_access_token("not-a-jwt")


class TestRegisterAndLogin:
    @pytest.mark.asyncio
    async def test_register_normalises_and_hashes(self, service):
        result = await service.register("  Ana  ", " Ana@Example.COM ", "secreto1")

        assert result.user.name == "Ana"
        assert result.user.email == "ana@example.com"
        assert result.user.password != "secreto1"
        assert decode_access_token(result.token) == result.user.id

    @pytest.mark.asyncio
    async def test_register_requires_every_field(self, service):
        with pytest.raises(ValidationError):
            await service.register("Ana", "", "secreto1")
        with pytest.raises(ValidationError):
            await service.register("  ", "ana@example.com", "secreto1")

    @pytest.mark.asyncio
    async def test_email_taken(self, service):
        await service.register("Ana", "ana@example.com", "secreto1")
        with pytest.raises(Conflict, match="ya está registrado"):
            await service.register("Otra Ana", "ANA@example.com", "secreto2")

    @pytest.mark.asyncio
    async def test_login(self, service):
        registered = await service.register("Ana", "ana@example.com", "secreto1")
        result = await service.login("ana@example.com", "secreto1")
        assert result.user.id == registered.user.id
        assert decode_access_token(result.token) == registered.user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email,password",
        [("ana@example.com", "equivocada"), ("nadie@example.com", "secreto1")],
    )
    async def test_bad_credentials_look_the_same(self, service, email, password):
        await service.register("Ana", "ana@example.com", "secreto1")
        with pytest.raises(Unauthenticated, match="Credenciales inválidas"):
            await service.login(email, password)


class TestProfile:
    @pytest.mark.asyncio
    async def test_unknown_user(self, service):
        with pytest.raises(NotFound):
            await service.get_user(999)

    @pytest.mark.asyncio
    async def test_upload_picture(self, service, factory, tmp_path):
        user = await factory.user()
        storage = ProfilePictureStorage(tmp_path, max_bytes=1024)

        updated = await service.upload_profile_picture(
            user.id, storage, "me.PNG", "image/png", b"\x89PNG fake"
        )

        assert updated.profile_picture.startswith("/uploads/profile-pictures/profile-")
        assert updated.profile_picture.endswith(".png")
        stored = tmp_path / "profile-pictures" / updated.profile_picture.rsplit("/", 1)[1]
        assert stored.read_bytes() == b"\x89PNG fake"

    @pytest.mark.parametrize(
        "content_type,data",
        [("text/plain", b"hola"), ("image/png", b""), ("image/png", b"x" * 2048)],
    )
    def test_storage_rejects(self, tmp_path, content_type, data):
        storage = ProfilePictureStorage(tmp_path, max_bytes=1024)
        with pytest.raises(ValidationError):
            storage.save("file.png", content_type, data)
        assert not (tmp_path / "profile-pictures").exists()
