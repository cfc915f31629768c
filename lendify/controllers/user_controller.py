# lendify/controllers/user_controller.py

from flask import Blueprint, request, jsonify
from lendify.services.user_service import UserService
from lendify.utils.decorators import admin_required
from lendify.utils.responses import json_error

user_bp = Blueprint("users", __name__)


@user_bp.get("/")
@admin_required
def list_users():
    users = UserService.list_active()
    return jsonify({"success": True, "data": [u.to_dict() for u in users]})


@user_bp.get("/deleted")
@admin_required
def list_deleted_users():
    users = UserService.list_deleted()
    return jsonify({"success": True, "data": [u.to_dict(include_deleted=True) for u in users]})


@user_bp.post("/")
@admin_required
def create_user():
    data = request.get_json(silent=True) or {}
    try:
        user = UserService.create_user(data)
        return jsonify({"success": True, "data": user.to_dict()}), 201
    except ValueError as e:
        code = 409 if "already exists" in str(e) else 400
        return json_error(str(e), code)


@user_bp.put("/<int:user_id>")
@admin_required
def update_user(user_id: int):
    data = request.get_json(silent=True) or {}
    try:
        user = UserService.update_user(user_id, data)
        return jsonify({"success": True, "data": user.to_dict()})
    except LookupError as e:
        return json_error(str(e), 404)
    except ValueError as e:
        code = 409 if "already exists" in str(e) else 400
        return json_error(str(e), code)


@user_bp.delete("/<int:user_id>")
@admin_required
def delete_user(user_id: int):
    try:
        UserService.soft_delete(user_id)
        return "", 204
    except LookupError as e:
        return json_error(str(e), 404)


@user_bp.put("/<int:user_id>/recover")
@admin_required
def recover_user(user_id: int):
    try:
        user = UserService.recover(user_id)
        return jsonify({"success": True, "message": "User recovered successfully.", "data": user.to_dict()})
    except LookupError as e:
        return json_error(str(e), 404)
