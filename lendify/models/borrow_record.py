from datetime import datetime
from lendify.extensions import db

STATUS_BORROWED = "Borrowed"
STATUS_RETURNED = "Returned"


class BorrowRecord(db.Model):
    __tablename__ = "borrow_records"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey("items.id"), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_BORROWED, index=True)  # Borrowed/Returned

    borrowed_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    returned_at = db.Column(db.DateTime, nullable=True)

    # only filled for batch borrows
    usage_location = db.Column(db.String(200), nullable=True)
    occasion = db.Column(db.String(200), nullable=True)
    batch_id = db.Column(db.String(32), nullable=True, index=True)

    user = db.relationship("User", backref="borrow_records")
    item = db.relationship("Item", backref="borrow_records")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user.name if self.user else None,
            "item_id": self.item_id,
            "item_name": self.item.name if self.item else None,
            "status": self.status,
            "borrowed_at": self.borrowed_at.isoformat() if self.borrowed_at else None,
            "returned_at": self.returned_at.isoformat() if self.returned_at else None,
            "usage_location": self.usage_location,
            "occasion": self.occasion,
            "batch_id": self.batch_id,
        }
