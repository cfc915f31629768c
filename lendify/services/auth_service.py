from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token
from lendify.models.user import User, ROLE_STUDENT
from lendify.repositories.user_repo import UserRepo


class AuthService:
    @staticmethod
    def register(name: str, student_id: str, email: str, password: str, role: str = ROLE_STUDENT):
        if UserRepo.get_by_student_id(student_id) or UserRepo.get_by_email(email):
            raise ValueError("Student ID or email already exists")

        user = User(
            name=name,
            student_id=student_id,
            email=email,
            password_hash=generate_password_hash(password),
            role=role
        )
        UserRepo.create(user)
        return user

    @staticmethod
    def login(student_id: str, password: str):
        user = UserRepo.get_by_student_id(student_id)
        # soft deleted accounts cannot log in
        if not user or not user.is_active or not check_password_hash(user.password_hash, password):
            raise ValueError("Invalid credentials")

        token = create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role, "name": user.name}
        )
        return token, user
