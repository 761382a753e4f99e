"""
Accounts: registration, login, profiles and profile pictures.

Passwords are hashed before they reach the repository and the hash never
leaves this module's callers (response schemas do not declare it).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from carpool.domain.errors import Conflict, NotFound, Unauthenticated, ValidationError
from carpool.infrastructure.models import UserModel
from carpool.infrastructure.repositories import UserRepository
from carpool.infrastructure.security import (
    create_access_token,
    hash_password,
    verify_password,
)
from carpool.infrastructure.storage import ProfilePictureStorage

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Credenciales inválidas"


@dataclass
class AuthResult:
    user: UserModel
    token: str


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        name, email = (name or "").strip(), (email or "").strip().lower()
        if not name or not email or not password:
            raise ValidationError("Todos los campos son requeridos")
        if await self.users.get_by_email(email):
            raise Conflict("El email ya está registrado")

        user = await self.users.create(
            name=name, email=email, password_hash=hash_password(password)
        )
        logger.info("User %d registered", user.id)
        return AuthResult(user=user, token=create_access_token(user.id, user.email))

    async def login(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            raise ValidationError("Email y contraseña son requeridos")
        user = await self.users.get_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password):
            raise Unauthenticated(INVALID_CREDENTIALS)
        return AuthResult(user=user, token=create_access_token(user.id, user.email))

    async def get_user(self, user_id: int) -> UserModel:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFound("Usuario no encontrado")
        return user

    async def upload_profile_picture(
        self,
        user_id: int,
        storage: ProfilePictureStorage,
        filename: str | None,
        content_type: str | None,
        data: bytes,
    ) -> UserModel:
        user = await self.get_user(user_id)
        user.profile_picture = storage.save(filename, content_type, data)
        await self.users.session.flush()
        await self.users.session.refresh(user)
        logger.info("User %d updated profile picture", user_id)
        return user
