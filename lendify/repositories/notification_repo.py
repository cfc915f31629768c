from lendify.models.notification_log import NotificationLog
from lendify.extensions import db


class NotificationRepo:
    @staticmethod
    def already_sent(record_id: int, notif_type: str = "loan_reminder") -> bool:
        return NotificationLog.query.filter_by(
            record_id=record_id, type=notif_type, success=True
        ).first() is not None

    @staticmethod
    def list_for_record(record_id: int):
        return NotificationLog.query.filter_by(record_id=record_id).order_by(NotificationLog.id.asc()).all()

    @staticmethod
    def log(entry: NotificationLog):
        # caller commits once per job run
        db.session.add(entry)
        return entry
