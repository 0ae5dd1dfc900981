from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from library_api.errors import NotFound
from library_api.repositories.user_repo import UserRepo
from library_api.services.auth_service import AuthService
from library_api.utils.auth import current_caller
from library_api.utils.validation import json_body

auth_bp = Blueprint("auth", __name__)


def user_json(user):
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "created_at": user.created_at.isoformat() if user.created_at else None,
        "updated_at": user.updated_at.isoformat() if user.updated_at else None,
    }


@auth_bp.post("/register", endpoint="auth_register")
def register():
    data = json_body()

    # role is never taken from the request body
    user = AuthService.register(
        username=data.get("username"),
        email=data.get("email"),
        password=data.get("password"),
    )
    return jsonify({"message": "User registered successfully", "user": user_json(user)}), 201


@auth_bp.post("/login", endpoint="auth_login")
def login():
    data = json_body()
    token, user = AuthService.login(data.get("username"), data.get("password"))
    return jsonify({"token": token, "user": user_json(user)})


@auth_bp.get("/me", endpoint="auth_me")
@jwt_required()
def me():
    caller = current_caller()
    user = UserRepo.get_by_id(caller.user_id)
    if not user:
        raise NotFound("User not found")
    return jsonify({"user": user_json(user)})
