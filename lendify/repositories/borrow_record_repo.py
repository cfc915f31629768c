from datetime import datetime

from lendify.models.borrow_record import BorrowRecord, STATUS_BORROWED
from lendify.extensions import db


class BorrowRecordRepo:
    @staticmethod
    def get(record_id: int):
        return db.session.get(BorrowRecord, record_id)

    @staticmethod
    def list_by_user(user_id: int):
        return (
            BorrowRecord.query.filter_by(user_id=user_id)
            .order_by(BorrowRecord.borrowed_at.desc(), BorrowRecord.id.desc())
            .all()
        )

    @staticmethod
    def list_all():
        return BorrowRecord.query.order_by(
            BorrowRecord.borrowed_at.desc(), BorrowRecord.id.desc()
        ).all()

    @staticmethod
    def count_borrowed() -> int:
        return BorrowRecord.query.filter_by(status=STATUS_BORROWED).count()

    @staticmethod
    def get_borrowed_for_update(record_id: int):
        stmt = (
            db.select(BorrowRecord)
            .where(BorrowRecord.id == record_id, BorrowRecord.status == STATUS_BORROWED)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def lock_borrowed(record_ids):
        """Locks the requested records that are still Borrowed; the rest are simply absent."""
        stmt = (
            db.select(BorrowRecord)
            .where(
                BorrowRecord.id.in_(sorted(set(record_ids))),
                BorrowRecord.status == STATUS_BORROWED,
            )
            .order_by(BorrowRecord.id.asc())
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return db.session.execute(stmt).scalars().all()

    @staticmethod
    def add(record: BorrowRecord):
        # no commit: the unit of work owns it
        db.session.add(record)
        return record

    @staticmethod
    def find_borrowed_before(cutoff: datetime):
        return BorrowRecord.query.filter(
            BorrowRecord.status == STATUS_BORROWED,
            BorrowRecord.borrowed_at < cutoff
        ).all()
