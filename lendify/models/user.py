from datetime import datetime
from lendify.extensions import db

ROLE_ADMIN = "admin"
ROLE_STUDENT = "student"


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    student_id = db.Column(db.String(50), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_STUDENT)  # admin/student

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    # soft delete: set while the account is deactivated
    deleted_at = db.Column(db.DateTime, nullable=True)

    @property
    def is_active(self):
        return self.deleted_at is None

    def to_dict(self, include_deleted=False):
        data = {
            "id": self.id,
            "name": self.name,
            "student_id": self.student_id,
            "email": self.email,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_deleted:
            data["deleted_at"] = self.deleted_at.isoformat() if self.deleted_at else None
        return data
