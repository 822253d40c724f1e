from __future__ import annotations

from typing import Optional

import bcrypt
import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from ..core.codes import user_identifier
from ..core.errors import (
    AuthenticationError,
    DuplicateUserError,
    InvalidInputError,
    NotFoundError,
)
from ..core.types import User
from ..data import db
from ..data.repos import UserRepository

logger = structlog.get_logger(__name__)

# bcrypt 只處理前 72 個位元組
_BCRYPT_MAX_BYTES = 72
MAX_USERNAME_LENGTH = 64


def hash_password(password: str, rounds: int = 12) -> str:
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, password_hash.encode("utf-8"))
    except ValueError:
        return False


class AuthService:
    """註冊、登入與帳號權限管理。"""

    def __init__(self, session_factory: sessionmaker, bcrypt_rounds: int = 12) -> None:
        self._session_factory = session_factory
        self._bcrypt_rounds = bcrypt_rounds

    def register(self, username: str, password: str) -> User:
        """建立新帳號；使用者十六進位碼於此時產生且之後不再變更。"""

        name = _clean_username(username)
        if not password:
            raise InvalidInputError("La contraseña es obligatoria")

        try:
            with db.session_scope(self._session_factory) as session:
                repo = UserRepository(session)
                if repo.get_by_username(name) is not None:
                    raise DuplicateUserError("Usuario ya existe")
                model = repo.create(
                    username=name,
                    password_hash=hash_password(password, self._bcrypt_rounds),
                    user_hex=user_identifier(name),
                )
                user = User.from_model(model)
        except IntegrityError as error:
            raise DuplicateUserError("Usuario ya existe") from error

        logger.info("user_registered", user_id=user.id, user_hex=user.user_hex)
        return user

    def login(self, username: str, password: str) -> User:
        with db.session_scope(self._session_factory) as session:
            model = UserRepository(session).get_by_username(username.strip())
            if model is None or not verify_password(password, model.password_hash):
                logger.info("login_rejected", username=username)
                raise AuthenticationError("Credenciales inválidas")
            user = User.from_model(model)

        logger.info("user_logged_in", user_id=user.id)
        return user

    def refresh(self, user_id: str) -> Optional[User]:
        """重新讀取使用者資料，帳號不存在時回傳 None。"""

        with db.session_scope(self._session_factory) as session:
            model = UserRepository(session).get(user_id)
            return User.from_model(model) if model is not None else None

    def has_admin(self) -> bool:
        """是否已有任何管理員帳號。"""

        with db.session_scope(self._session_factory) as session:
            return UserRepository(session).admin_count() > 0

    def promote(self, username: str, is_admin: bool = True) -> User:
        with db.session_scope(self._session_factory) as session:
            repo = UserRepository(session)
            model = repo.get_by_username(username.strip())
            if model is None:
                raise NotFoundError(f"Usuario no encontrado: {username}")
            repo.set_admin(model, is_admin)
            user = User.from_model(model)

        logger.info("user_admin_changed", user_id=user.id, is_admin=is_admin)
        return user


def _clean_username(username: str) -> str:
    name = username.strip()
    if not name:
        raise InvalidInputError("El usuario es obligatorio")
    if len(name) > MAX_USERNAME_LENGTH:
        raise InvalidInputError(f"El usuario no puede superar {MAX_USERNAME_LENGTH} caracteres")
    return name
