# lendify/controllers/item_controller.py

from flask import Blueprint, request, jsonify
from lendify.exceptions import LedgerError
from lendify.services.item_service import ItemService
from lendify.services.ledger_service import LedgerService
from lendify.utils.decorators import admin_required
from lendify.utils.responses import json_error, ledger_error

item_bp = Blueprint("items", __name__)


@item_bp.get("/")
def list_items():
    items = ItemService.list_items()
    return jsonify({"success": True, "data": [i.to_dict() for i in items]})


@item_bp.get("/<int:item_id>")
def get_item(item_id: int):
    try:
        item = ItemService.get_item(item_id)
        return jsonify({"success": True, "data": item.to_dict()})
    except LookupError as e:
        return json_error(str(e), 404)


@item_bp.post("/")
@admin_required
def create_item():
    data = request.get_json(silent=True) or {}
    try:
        item = ItemService.create_item(data)
        return jsonify({"success": True, "data": item.to_dict()}), 201
    except (TypeError, ValueError) as e:
        return json_error(str(e), 400)


@item_bp.put("/<int:item_id>")
@admin_required
def update_item(item_id: int):
    data = request.get_json(silent=True) or {}
    try:
        item = ItemService.update_item(item_id, data)
        return jsonify({"success": True, "data": item.to_dict()})
    except LookupError as e:
        return json_error(str(e), 404)
    except ValueError as e:
        return json_error(str(e), 400)


@item_bp.post("/<int:item_id>/restock")
@admin_required
def restock_item(item_id: int):
    data = request.get_json(silent=True) or {}
    delta = data.get("delta")
    try:
        item = LedgerService.restock(item_id, delta)
        return jsonify({"success": True, "data": item.to_dict()})
    except LedgerError as e:
        return ledger_error(e)


@item_bp.delete("/<int:item_id>")
@admin_required
def delete_item(item_id: int):
    try:
        ItemService.delete_item(item_id)
        return "", 204
    except LookupError as e:
        return json_error(str(e), 404)
    except ValueError as e:
        return json_error(str(e), 409)
