from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from lendify.exceptions import LedgerError
from lendify.services.ledger_service import LedgerService
from lendify.repositories.borrow_record_repo import BorrowRecordRepo
from lendify.utils.decorators import admin_required, current_identity, is_admin
from lendify.utils.responses import json_error, ledger_error

borrow_bp = Blueprint("borrow", __name__)


def _as_id(value):
    # JSON numbers only; "3" or 3.0 are rejected like any other malformed id
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _foreign_records(record_ids, user_id):
    """Ids among record_ids that exist but belong to someone else."""
    foreign = []
    for record_id in record_ids:
        record = BorrowRecordRepo.get(record_id)
        if record and record.user_id != user_id:
            foreign.append(record_id)
    return foreign


@borrow_bp.post("/")
@jwt_required()
def borrow_item():
    data = request.get_json(silent=True) or {}
    user_id, role = current_identity()

    item_id = _as_id(data.get("item_id"))
    if item_id is None:
        return json_error("item_id is required", 400)

    # admins can lend to somebody else (front desk)
    target_user_id = user_id
    if data.get("user_id") is not None:
        if not is_admin(role):
            return json_error("Only admins can borrow on behalf of another user", 403)
        target_user_id = _as_id(data.get("user_id"))
        if target_user_id is None:
            return json_error("user_id must be an integer", 400)

    try:
        record = LedgerService.borrow(target_user_id, item_id)
        return jsonify({"success": True, "message": "Item borrowed", "data": record.to_dict()}), 201
    except LedgerError as e:
        return ledger_error(e)


@borrow_bp.put("/return/<int:record_id>")
@jwt_required()
def return_item(record_id):
    user_id, role = current_identity()
    if not is_admin(role) and _foreign_records([record_id], user_id):
        return json_error("This record does not belong to you", 403)

    try:
        record = LedgerService.return_one(record_id)
        return jsonify({"success": True, "message": "Item returned", "data": record.to_dict()})
    except LedgerError as e:
        return ledger_error(e)


@borrow_bp.post("/batch")
@jwt_required()
def borrow_batch():
    """
    Body: {"items": [{"item_id": 1, "quantity": 2}, ...],
           "usage_location": "...", "occasion": "...", "user_id": optional, admin only}
    """
    data = request.get_json(silent=True) or {}
    user_id, role = current_identity()

    entries = data.get("items")
    if not isinstance(entries, list) or not entries:
        return json_error("items must be a non-empty list", 400)

    item_quantities = {}
    for entry in entries:
        if not isinstance(entry, dict):
            return json_error("every entry needs item_id and quantity", 400)
        item_id = _as_id(entry.get("item_id"))
        if item_id is None:
            return json_error("every entry needs an integer item_id", 400)
        if item_id in item_quantities:
            return json_error(f"item {item_id} is listed more than once", 400)
        item_quantities[item_id] = entry.get("quantity")

    target_user_id = user_id
    if data.get("user_id") is not None:
        if not is_admin(role):
            return json_error("Only admins can borrow on behalf of another user", 403)
        target_user_id = _as_id(data.get("user_id"))
        if target_user_id is None:
            return json_error("user_id must be an integer", 400)

    try:
        created = LedgerService.borrow_batch(
            target_user_id,
            item_quantities,
            data.get("usage_location"),
            data.get("occasion"),
        )
        return jsonify({"success": True, "created_count": created}), 201
    except LedgerError as e:
        return ledger_error(e)


@borrow_bp.post("/return/batch")
@jwt_required()
def return_batch():
    """Body: {"record_ids": [1, 2, 3]}"""
    data = request.get_json(silent=True) or {}
    user_id, role = current_identity()

    raw_ids = data.get("record_ids")
    if not isinstance(raw_ids, list) or not raw_ids:
        return json_error("record_ids must be a non-empty list", 400)
    record_ids = [_as_id(x) for x in raw_ids]
    if any(x is None for x in record_ids):
        return json_error("record_ids must be integers", 400)
    if len(set(record_ids)) != len(record_ids):
        return json_error("record_ids must not contain duplicates", 400)

    if not is_admin(role):
        foreign = _foreign_records(record_ids, user_id)
        if foreign:
            return json_error("Some records do not belong to you", 403, record_ids=foreign)

    try:
        returned = LedgerService.return_batch(record_ids)
        return jsonify({"success": True, "returned_count": returned})
    except LedgerError as e:
        return ledger_error(e)


@borrow_bp.get("/my")
@jwt_required()
def my_records():
    user_id, _role = current_identity()
    records = BorrowRecordRepo.list_by_user(user_id)
    return jsonify({"success": True, "data": [r.to_dict() for r in records]})


@borrow_bp.get("/records")
@admin_required
def all_records():
    records = BorrowRecordRepo.list_all()
    return jsonify({"success": True, "data": [r.to_dict() for r in records]})
