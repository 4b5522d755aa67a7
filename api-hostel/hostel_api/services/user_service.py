# hostel_api/services/user_service.py

from datetime import datetime
from typing import Callable

from sqlalchemy.exc import IntegrityError

from hostel_api.core.clock import utcnow
from hostel_api.core.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from hostel_api.entities.principal import Role
from hostel_api.infrastructure.database.models.user_model import UserModel
from hostel_api.infrastructure.security.password_hasher import PasswordHasher
from hostel_api.repositories.user_repository import UserRepository

INVALID_CREDENTIALS = "Invalid credentials."


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    def __init__(self, user_repository: UserRepository, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._user_repository = user_repository
        self._clock = clock

    def create_user(self, *, full_name: str, email: str, password: str, role: Role = Role.USER) -> UserModel:
        email = normalize_email(email)
        if self._user_repository.get_by_email_any(email) is not None:
            raise ConflictError("Email already registered.")

        try:
            hashed = PasswordHasher.hash_password(password)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        model = UserModel(
            full_name=full_name.strip(),
            email=email,
            role=Role(role).value,
            password_algo=hashed.algo,
            password_iterations=hashed.iterations,
            password_hash=hashed.password_hash,
            password_salt=hashed.password_salt,
            created_at=self._clock(),
            updated_at=None,
            last_login=None,
            is_deleted=False,
        )
        try:
            return self._user_repository.add(model)
        except IntegrityError as e:
            # outro cadastro com o mesmo e-mail foi gravado entre a checagem e o INSERT
            self._user_repository.rollback()
            raise ConflictError("Email already registered.") from e

    def get_user(self, user_id: int) -> UserModel:
        user = self._user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    def find_active(self, user_id: int) -> UserModel | None:
        return self._user_repository.get_by_id(user_id)

    def set_role(self, *, user_id: int, role: Role) -> UserModel:
        user = self.get_user(user_id)
        user.role = Role(role).value
        user.updated_at = self._clock()
        return user

    def find_by_email(self, email: str) -> UserModel | None:
        return self._user_repository.get_by_email(normalize_email(email))

    def authenticate(self, *, email: str, password: str) -> UserModel:
        # mesma resposta (e custo) para e-mail inexistente e senha errada
        user = self._user_repository.get_by_email(normalize_email(email))
        if user is None:
            PasswordHasher.burn(password)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        ok = PasswordHasher.verify_password(
            password,
            password_hash=user.password_hash,
            password_salt=user.password_salt,
            iterations=user.password_iterations,
            algo=user.password_algo,
        )
        if not ok:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        user.last_login = self._clock()
        return user
