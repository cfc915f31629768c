from lendify.models.user import User
from lendify.extensions import db


class UserRepo:
    @staticmethod
    def get_by_student_id(student_id: str):
        return User.query.filter_by(student_id=student_id).first()

    @staticmethod
    def get_by_email(email: str):
        return User.query.filter_by(email=email).first()

    @staticmethod
    def get_by_id(user_id: int):
        return db.session.get(User, user_id)

    @staticmethod
    def get_active(user_id: int):
        return User.query.filter(User.id == user_id, User.deleted_at.is_(None)).first()

    @staticmethod
    def list_active():
        return User.query.filter(User.deleted_at.is_(None)).order_by(User.name.asc()).all()

    @staticmethod
    def list_deleted():
        return User.query.filter(User.deleted_at.isnot(None)).order_by(User.deleted_at.desc()).all()

    @staticmethod
    def create(user: User):
        db.session.add(user)
        db.session.commit()
        return user

    @staticmethod
    def update():
        db.session.commit()
