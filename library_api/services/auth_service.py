from flask import current_app
from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash, check_password_hash

from library_api.errors import Conflict, Unauthorized, ValidationError
from library_api.models.user import User
from library_api.repositories.user_repo import UserRepo
from library_api.services.access_policy import ROLES, USER
from library_api.utils.validation import text_value


class AuthService:
    @staticmethod
    def register(username: str, email: str, password: str, role: str = USER):
        username = text_value(username, "Username must be a string")
        email = text_value(email, "Email must be a string")
        if password is not None and not isinstance(password, str):
            raise ValidationError("Password must be a string")
        if not username or not email or not password:
            raise ValidationError("Username, password, and email are required")
        if role not in ROLES:
            raise ValidationError(f"Unknown role '{role}'")

        if UserRepo.get_by_username(username):
            raise Conflict("Username already exists")
        if UserRepo.get_by_email(email):
            raise Conflict("Email already exists")

        user = User(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=role
        )
        UserRepo.create(user)
        current_app.logger.info(f"[auth] registered {role} '{username}' (id={user.id})")
        return user

    @staticmethod
    def login(login: str, password: str):
        login = text_value(login, "Username must be a string")
        if not isinstance(password, str):
            raise Unauthorized("Invalid credentials")

        user = UserRepo.get_by_login(login)
        if not user or not check_password_hash(user.password_hash, password):
            raise Unauthorized("Invalid credentials")

        token = create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role, "username": user.username}
        )
        return token, user
