from collections import Counter
from datetime import datetime
from uuid import uuid4

from flask import current_app

from lendify.exceptions import (
    ItemNotFound,
    InsufficientStock,
    InvalidQuantity,
    InvalidRecordIds,
    OutOfStock,
    RecordNotFound,
    UserNotFound,
    ValidationError,
)
from lendify.models.borrow_record import BorrowRecord, STATUS_BORROWED, STATUS_RETURNED
from lendify.repositories.borrow_record_repo import BorrowRecordRepo
from lendify.repositories.item_repo import ItemRepo
from lendify.repositories.user_repo import UserRepo
from lendify.services.unit_of_work import unit_of_work


def _positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _require_id(value, field: str) -> int:
    if not _positive_int(value):
        raise ValidationError(f"{field} must be a positive integer")
    return value


def _require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


class LedgerService:
    """
    Owns the stock/borrow-record consistency:

    - stock never goes below zero, a borrow that would do so is rejected;
    - item status is recomputed from stock in the same unit of work as the change;
    - a record is returned at most once;
    - Borrowed records + stock == provisioned stock, for every item.

    Every public method is one unit of work: it commits everything or nothing.
    The caller passes the acting user explicitly; nothing here reads request state.
    """

    @staticmethod
    def _require_active_user(user_id: int):
        user = UserRepo.get_active(user_id)
        if not user:
            raise UserNotFound(user_id)
        return user

    @staticmethod
    def _open_record(user_id: int, item_id: int, **context) -> BorrowRecord:
        record = BorrowRecord(
            user_id=user_id,
            item_id=item_id,
            status=STATUS_BORROWED,
            borrowed_at=datetime.utcnow(),
            **context
        )
        return BorrowRecordRepo.add(record)

    @staticmethod
    def borrow(user_id: int, item_id: int) -> BorrowRecord:
        _require_id(user_id, "user_id")
        _require_id(item_id, "item_id")

        with unit_of_work("ledger.borrow") as session:
            LedgerService._require_active_user(user_id)

            item = ItemRepo.get_for_update(item_id)
            if not item:
                current_app.logger.warning(f"[ledger] borrow rejected: item {item_id} not found")
                raise ItemNotFound(item_id)
            if item.stock <= 0:
                current_app.logger.warning(f"[ledger] borrow rejected: item {item_id} out of stock")
                raise OutOfStock(item_id)

            item.apply_stock_delta(-1)
            record = LedgerService._open_record(user_id, item_id)
            session.flush()

        current_app.logger.info(
            f"[ledger] borrow user={user_id} item={item_id} record={record.id} stock_left={item.stock}"
        )
        return record

    @staticmethod
    def return_one(record_id: int) -> BorrowRecord:
        _require_id(record_id, "record_id")

        with unit_of_work("ledger.return_one"):
            record = BorrowRecordRepo.get_borrowed_for_update(record_id)
            if not record:
                current_app.logger.warning(f"[ledger] return rejected: no borrowed record {record_id}")
                raise RecordNotFound(record_id)

            item = ItemRepo.get_for_update(record.item_id)
            if not item:
                # the FK makes this unreachable unless the store is inconsistent
                raise ItemNotFound(record.item_id)

            record.status = STATUS_RETURNED
            record.returned_at = datetime.utcnow()
            item.apply_stock_delta(1)

        current_app.logger.info(
            f"[ledger] return record={record_id} item={item.id} stock_now={item.stock}"
        )
        return record

    @staticmethod
    def borrow_batch(user_id: int, item_quantities: dict, usage_location: str, occasion: str) -> int:
        """
        Borrows several items at once. One Borrowed record is written per
        unit of quantity, all sharing the batch's context and batch_id.
        Either every entry is fulfilled or nothing is.
        """
        _require_id(user_id, "user_id")
        if not isinstance(item_quantities, dict) or not item_quantities:
            raise ValidationError("item_quantities must be a non-empty mapping")
        for item_id, quantity in item_quantities.items():
            _require_id(item_id, "item_id")
            if not _positive_int(quantity):
                raise InvalidQuantity(item_id, quantity)
        usage_location = _require_text(usage_location, "usage_location")
        occasion = _require_text(occasion, "occasion")

        batch_id = uuid4().hex
        with unit_of_work("ledger.borrow_batch"):
            LedgerService._require_active_user(user_id)

            items = {item.id: item for item in ItemRepo.lock_many(item_quantities.keys())}

            # check everything before touching anything
            for item_id in sorted(item_quantities):
                requested = item_quantities[item_id]
                item = items.get(item_id)
                if not item:
                    current_app.logger.warning(f"[ledger] batch {batch_id} rejected: item {item_id} not found")
                    raise ItemNotFound(item_id)
                if item.stock < requested:
                    current_app.logger.warning(
                        f"[ledger] batch {batch_id} rejected: item {item_id} "
                        f"requested={requested} available={item.stock}"
                    )
                    raise InsufficientStock(item_id, item.stock, requested)

            created = 0
            for item_id in sorted(item_quantities):
                quantity = item_quantities[item_id]
                items[item_id].apply_stock_delta(-quantity)
                for _ in range(quantity):
                    LedgerService._open_record(
                        user_id,
                        item_id,
                        usage_location=usage_location,
                        occasion=occasion,
                        batch_id=batch_id,
                    )
                    created += 1

        current_app.logger.info(
            f"[ledger] batch borrow {batch_id} user={user_id} items={len(item_quantities)} records={created}"
        )
        return created

    @staticmethod
    def return_batch(record_ids) -> int:
        record_ids = list(record_ids or [])
        if not record_ids:
            raise ValidationError("record_ids must not be empty")
        for record_id in record_ids:
            _require_id(record_id, "record_id")
        if len(set(record_ids)) != len(record_ids):
            raise ValidationError("record_ids must not contain duplicates")

        with unit_of_work("ledger.return_batch"):
            records = BorrowRecordRepo.lock_borrowed(record_ids)
            if len(records) != len(record_ids):
                missing = set(record_ids) - {r.id for r in records}
                current_app.logger.warning(f"[ledger] batch return rejected: invalid ids {sorted(missing)}")
                raise InvalidRecordIds(missing)

            per_item = Counter(r.item_id for r in records)
            items = {item.id: item for item in ItemRepo.lock_many(per_item.keys())}
            missing_items = set(per_item) - set(items)
            if missing_items:
                raise ItemNotFound(min(missing_items))

            now = datetime.utcnow()
            for record in records:
                record.status = STATUS_RETURNED
                record.returned_at = now
            for item_id, count in per_item.items():
                items[item_id].apply_stock_delta(count)

        current_app.logger.info(
            f"[ledger] batch return records={len(records)} items={dict(per_item)}"
        )
        return len(records)

    @staticmethod
    def restock(item_id: int, delta: int):
        """Provisioning change made by an admin (new units bought, units written off)."""
        _require_id(item_id, "item_id")
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise ValidationError("delta must be a non-zero integer")

        with unit_of_work("ledger.restock"):
            item = ItemRepo.get_for_update(item_id)
            if not item:
                raise ItemNotFound(item_id)
            if item.stock + delta < 0:
                raise InsufficientStock(item_id, item.stock, -delta)
            item.apply_stock_delta(delta)

        current_app.logger.info(f"[ledger] restock item={item_id} delta={delta} stock_now={item.stock}")
        return item

