from datetime import datetime, timedelta

from lendify.extensions import db, mail
from lendify.models.item import Item
from lendify.repositories.notification_repo import NotificationRepo
from lendify.services.ledger_service import LedgerService
from lendify.tasks.loan_reminders import run_loan_reminder_job


def _borrow_days_ago(user, item, days):
    record = LedgerService.borrow(user.id, item.id)
    record.borrowed_at = datetime.utcnow() - timedelta(days=days)
    db.session.commit()
    return record


def test_reminds_old_loans_once(app, student, make_item):
    item = make_item(stock=3, name="Laptop")
    old = _borrow_days_ago(student, item, 10)
    _borrow_days_ago(student, item, 1)

    with mail.record_messages() as outbox:
        first = run_loan_reminder_job()
        second = run_loan_reminder_job()

    assert first == {"due": 1, "sent": 1, "skipped": 0, "failed": 0}
    assert second == {"due": 1, "sent": 0, "skipped": 1, "failed": 0}
    assert len(outbox) == 1
    assert outbox[0].recipients == [student.email]
    assert "Laptop" in outbox[0].body

    logs = NotificationRepo.list_for_record(old.id)
    assert len(logs) == 1
    assert logs[0].success is True


def test_failed_mail_is_logged_and_retried(app, student, make_item, monkeypatch):
    item = make_item(stock=1)
    record = _borrow_days_ago(student, item, 30)

    def broken_send(message):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(mail, "send", broken_send)
    result = run_loan_reminder_job()

    assert result["failed"] == 1
    logs = NotificationRepo.list_for_record(record.id)
    assert logs[0].success is False
    assert "smtp down" in logs[0].error_message

    monkeypatch.undo()
    with mail.record_messages() as outbox:
        assert run_loan_reminder_job()["sent"] == 1
    assert len(outbox) == 1


def test_job_never_touches_stock(app, student, make_item):
    item = make_item(stock=2)
    _borrow_days_ago(student, item, 30)

    run_loan_reminder_job()

    assert db.session.get(Item, item.id).stock == 1
