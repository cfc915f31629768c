# lendify/tasks/loan_reminders.py
from __future__ import annotations

from datetime import datetime, timedelta
from flask import current_app

from lendify.extensions import db
from lendify.repositories.borrow_record_repo import BorrowRecordRepo
from lendify.repositories.notification_repo import NotificationRepo
from lendify.services.mail_service import MailService, LOAN_REMINDER


def run_loan_reminder_job(now: datetime | None = None) -> dict:
    """
    Finds records still Borrowed after LOAN_REMINDER_DAYS and mails each
    borrower once per record. Reads records only, never touches stock.
    Must run inside an app context.
    """
    now = now or datetime.utcnow()
    cutoff = now - timedelta(days=current_app.config["LOAN_REMINDER_DAYS"])

    try:
        rows = BorrowRecordRepo.find_borrowed_before(cutoff)

        sent = 0
        skipped = 0
        failed = 0
        for record in rows:
            if NotificationRepo.already_sent(record.id, LOAN_REMINDER):
                skipped += 1
                continue
            if MailService.send_loan_reminder(record):
                sent += 1
            else:
                failed += 1

        # single commit for all logs
        db.session.commit()

    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"[loan_reminders] failed: {e}")
        raise

    current_app.logger.info(
        f"[loan_reminders] due={len(rows)} sent={sent} skipped={skipped} failed={failed}"
    )
    return {"due": len(rows), "sent": sent, "skipped": skipped, "failed": failed}
