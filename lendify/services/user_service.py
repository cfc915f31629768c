from datetime import datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError

from lendify.extensions import db
from lendify.models.user import ROLE_ADMIN, ROLE_STUDENT
from lendify.repositories.user_repo import UserRepo
from lendify.services.auth_service import AuthService

ROLES = (ROLE_ADMIN, ROLE_STUDENT)


class UserService:
    @staticmethod
    def list_active():
        return UserRepo.list_active()

    @staticmethod
    def list_deleted():
        return UserRepo.list_deleted()

    @staticmethod
    def create_user(data: dict):
        """Admin created accounts start with the configured default password."""
        name = (data.get("name") or "").strip()
        student_id = (data.get("student_id") or "").strip()
        email = (data.get("email") or "").strip()
        role = data.get("role") or ROLE_STUDENT
        if not name or not student_id or not email:
            raise ValueError("name, student_id and email are required")
        if role not in ROLES:
            raise ValueError(f"role must be one of {', '.join(ROLES)}")

        return AuthService.register(
            name=name,
            student_id=student_id,
            email=email,
            password=current_app.config["DEFAULT_USER_PASSWORD"],
            role=role,
        )

    @staticmethod
    def update_user(user_id: int, data: dict):
        user = UserRepo.get_active(user_id)
        if not user:
            raise LookupError("Active user not found")

        changes = {}
        for k in ["name", "student_id", "email", "role"]:
            if k in data:
                value = str(data[k] or "").strip()
                if not value:
                    raise ValueError(f"{k} cannot be empty")
                changes[k] = value

        if "role" in changes and changes["role"] not in ROLES:
            raise ValueError(f"role must be one of {', '.join(ROLES)}")

        # uniqueness is checked on the values that will actually be stored
        if "student_id" in changes:
            other = UserRepo.get_by_student_id(changes["student_id"])
            if other and other.id != user.id:
                raise ValueError("Student ID or email already exists")
        if "email" in changes:
            other = UserRepo.get_by_email(changes["email"])
            if other and other.id != user.id:
                raise ValueError("Student ID or email already exists")

        for k, value in changes.items():
            setattr(user, k, value)

        try:
            UserRepo.update()
        except IntegrityError:
            # a concurrent update took the same student_id/email
            db.session.rollback()
            raise ValueError("Student ID or email already exists")
        return user

    @staticmethod
    def soft_delete(user_id: int):
        user = UserRepo.get_active(user_id)
        if not user:
            raise LookupError("Active user not found or already deleted")
        user.deleted_at = datetime.utcnow()
        UserRepo.update()
        current_app.logger.info(f"[users] soft deleted user={user_id}")
        return user

    @staticmethod
    def recover(user_id: int):
        user = UserRepo.get_by_id(user_id)
        if not user or user.deleted_at is None:
            raise LookupError("Deleted user not found or user is already active")
        user.deleted_at = None
        UserRepo.update()
        current_app.logger.info(f"[users] recovered user={user_id}")
        return user
