# lendify/services/mail_service.py
from __future__ import annotations

from datetime import datetime
from flask import current_app
from flask_mail import Message

from lendify.extensions import mail
from lendify.models.notification_log import NotificationLog
from lendify.repositories.notification_repo import NotificationRepo

LOAN_REMINDER = "loan_reminder"


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body)
            mail.send(msg)
            return True, None
        except Exception as e:
            # a broken SMTP setup must not stop the reminder run
            current_app.logger.warning(f"[MailService] could not send mail to {to_email}: {e}")
            return False, str(e)

    @staticmethod
    def log_notification(
        record_id: int,
        notif_type: str,
        to_email: str | None,
        message: str,
        success: bool,
        error: str | None = None,
    ) -> NotificationLog:
        row = NotificationLog(
            record_id=record_id,
            type=notif_type,
            email=to_email,
            message=message,
            success=bool(success),
            error_message=error,
            sent_at=datetime.utcnow(),
        )
        return NotificationRepo.log(row)

    @staticmethod
    def _record_labels(record):
        user = getattr(record, "user", None)
        item = getattr(record, "item", None)

        to_email = getattr(user, "email", None) if user else None
        name = getattr(user, "name", "Student") if user else "Student"
        item_name = getattr(item, "name", f"Item #{getattr(record, 'item_id', '-')}")

        return to_email, name, item_name, record.borrowed_at

    @staticmethod
    def send_loan_reminder(record) -> bool:
        """
        Reminds the borrower that an item is still out with them, and logs the attempt.
        No commit here: the job commits once at the end.
        """
        to_email, name, item_name, borrowed_at = MailService._record_labels(record)

        subject = "Lendify: please return your borrowed equipment"
        body = (
            f"Hello {name},\n\n"
            f"You borrowed '{item_name}' on {borrowed_at:%Y-%m-%d} and it has not been returned yet.\n"
            f"Please bring it back to the equipment office as soon as you can.\n"
        )

        if not to_email:
            MailService.log_notification(
                record_id=record.id,
                notif_type=LOAN_REMINDER,
                to_email=None,
                message="User has no email address",
                success=False,
                error="missing_email",
            )
            return False

        ok, err = MailService.send_email(to_email, subject, body)

        MailService.log_notification(
            record_id=record.id,
            notif_type=LOAN_REMINDER,
            to_email=to_email,
            message=body if ok else "Mail could not be sent",
            success=ok,
            error=err,
        )
        return ok
