from flask import jsonify

from lendify.exceptions import (
    ConflictError,
    InsufficientStock,
    InvalidRecordIds,
    ItemNotFound,
    OutOfStock,
    RecordNotFound,
    StoreError,
    UserNotFound,
    ValidationError,
)


def json_error(message, code=400, **extra):
    payload = {"success": False, "message": message}
    payload.update(extra)
    return jsonify(payload), code


def ledger_error(e):
    """Maps a ledger failure to (response, status). Nothing was written in any of these cases."""
    if isinstance(e, ValidationError):
        return json_error(str(e), 400)
    if isinstance(e, InvalidRecordIds):
        return json_error(str(e), 404, invalid_ids=e.missing)
    if isinstance(e, ItemNotFound):
        return json_error(str(e), 404, item_id=e.item_id)
    if isinstance(e, RecordNotFound):
        return json_error(str(e), 404, record_id=e.record_id)
    if isinstance(e, UserNotFound):
        return json_error(str(e), 404, user_id=e.user_id)
    if isinstance(e, (OutOfStock, InsufficientStock)):
        return json_error(str(e), 409, item_id=e.item_id, available=e.available, requested=e.requested)
    if isinstance(e, ConflictError):
        return json_error(str(e), 409)
    if isinstance(e, StoreError):
        return json_error("A database error occurred.", 500)
    return json_error("Unexpected error", 500)
