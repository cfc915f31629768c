# lendify/models/notification_log.py
from datetime import datetime
from lendify.extensions import db


class NotificationLog(db.Model):
    __tablename__ = "notification_logs"

    id = db.Column(db.Integer, primary_key=True)

    record_id = db.Column(db.Integer, db.ForeignKey("borrow_records.id"), nullable=False, index=True)

    # loan_reminder for now
    type = db.Column(db.String(50), nullable=False, default="loan_reminder")

    email = db.Column(db.String(255), nullable=True)
    message = db.Column(db.String(1000), nullable=True)

    sent_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    success = db.Column(db.Boolean, nullable=False, default=True)
    error_message = db.Column(db.String(500), nullable=True)

    record = db.relationship("BorrowRecord", backref="notifications")
