from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt
from lendify.services.auth_service import AuthService
from lendify.repositories.user_repo import UserRepo
from lendify.utils.decorators import current_identity
from lendify.utils.responses import json_error

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register", endpoint="auth_register")
def register():
    data = request.get_json(silent=True) or {}

    name = (data.get("name") or "").strip()
    student_id = (data.get("student_id") or "").strip()
    email = (data.get("email") or "").strip()
    password = (data.get("password") or "").strip()

    if not name or not student_id or not email or not password:
        return json_error("name/student_id/email/password are required", 400)

    try:
        user = AuthService.register(
            name=name,
            student_id=student_id,
            email=email,
            password=password,
        )  # self registration is always a student
        return jsonify({"success": True, "user": user.to_dict()}), 201
    except ValueError as e:
        return json_error(str(e), 409)


@auth_bp.post("/login", endpoint="auth_login")
def login():
    data = request.get_json(silent=True) or {}
    student_id = (data.get("student_id") or "").strip()
    password = (data.get("password") or "").strip()
    if not student_id or not password:
        return json_error("Student ID and password are required", 400)

    try:
        token, user = AuthService.login(student_id, password)
        return jsonify({
            "success": True,
            "access_token": token,
            "user": user.to_dict()
        })
    except ValueError as e:
        return json_error(str(e), 401)


@auth_bp.get("/me", endpoint="auth_me")
@jwt_required()
def me():
    user_id, _role = current_identity()
    user = UserRepo.get_active(user_id)
    if not user:
        return json_error("User not found", 404)

    data = user.to_dict()
    data["role"] = get_jwt().get("role", user.role)
    return jsonify({"success": True, "user": data})
