"""
Session endpoints (mounted under /api/v1/users):
- POST  /register        multipart form + avatar (+ optional coverImage)
- POST  /login           returns accessToken and refreshToken
- POST  /refresh-token   rotates the refresh token
- POST  /logout          clears the stored refresh token
- PATCH /changePassword

Tokens go back both in the JSON body and as HttpOnly cookies named
accessToken / refreshToken. The work itself happens in services.sessions.
"""
from __future__ import annotations

from flask import Blueprint, request, g, current_app

from api.responses import api_response
from models.schemas.account import (
    RegisterSchema,
    LoginSchema,
    RefreshSchema,
    ChangePasswordSchema,
    AccountOutSchema,
)
from utils.decorators import jwt_required
from utils.media import save_upload, discard_upload

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
change_password_schema = ChangePasswordSchema()
account_out_schema = AccountOutSchema()


def _sessions():
    return current_app.extensions["session_manager"]


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": current_app.config.get("COOKIE_SECURE", True),
        "path": "/",
    }


def _set_token_cookies(response, access_token: str, refresh_token: str):
    opts = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE, access_token,
        max_age=int(current_app.config["ACCESS_TOKEN_EXPIRES"].total_seconds()), **opts
    )
    response.set_cookie(
        REFRESH_COOKIE, refresh_token,
        max_age=int(current_app.config["REFRESH_TOKEN_EXPIRES"].total_seconds()), **opts
    )
    return response


@bp.post("/register")
def register():
    """
    Register a new account.
    ---
    tags:
      - Users
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: fullName, type: string, required: true }
      - { in: formData, name: email, type: string, required: true }
      - { in: formData, name: username, type: string, required: true }
      - { in: formData, name: password, type: string, required: true }
      - { in: formData, name: avatar, type: file, required: true }
      - { in: formData, name: coverImage, type: file, required: false }
    responses:
      201:
        description: Created
      400:
        description: Missing field or avatar
      409:
        description: Username or email already registered
    """
    data = register_schema.load(request.form.to_dict())
    folder = current_app.config["UPLOAD_FOLDER"]
    avatar_path = save_upload(request.files.get("avatar"), folder)
    cover_image_path = save_upload(request.files.get("coverImage"), folder)

    try:
        account = _sessions().register(
            full_name=data["full_name"],
            email=data["email"],
            username=data["username"],
            password=data["password"],
            avatar_path=avatar_path,
            cover_image_path=cover_image_path,
        )
    finally:
        # the uploader removes what it sends; anything left was never uploaded
        discard_upload(avatar_path)
        discard_upload(cover_image_path)
    return api_response(account_out_schema.dump(account), "User registered successfully", 201)


@bp.post("/login")
def login():
    """
    Login with username or email; returns access and refresh tokens
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             username: { type: string }
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens, also set as cookies)
      401:
        description: Wrong password
      404:
        description: No such user
    """
    data = login_schema.load(request.get_json(silent=True) or {})
    account, access_token, refresh_token = _sessions().login(
        password=data["password"], username=data["username"], email=data["email"]
    )
    response, status = api_response(
        {
            "user": account_out_schema.dump(account),
            "accessToken": access_token,
            "refreshToken": refresh_token,
        },
        "User logged in successfully",
    )
    return _set_token_cookies(response, access_token, refresh_token), status


@bp.post("/refresh-token")
def refresh_token():
    """
    Exchange a refresh token for a new access/refresh pair (rotation).
    A body refreshToken wins over the refreshToken cookie.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK
      401:
        description: Missing, invalid, expired or already used refresh token
    """
    data = refresh_schema.load(request.get_json(silent=True) or {})
    incoming = data.get("refresh_token") or request.cookies.get(REFRESH_COOKIE)
    access_token, new_refresh_token = _sessions().refresh(incoming)
    response, status = api_response(
        {"accessToken": access_token, "refreshToken": new_refresh_token},
        "Access token refreshed",
    )
    return _set_token_cookies(response, access_token, new_refresh_token), status


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: clears the stored refresh token and both cookies
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    _sessions().logout(g.current_user.id)
    response, status = api_response({}, "User logged out")
    secure = current_app.config.get("COOKIE_SECURE", True)
    response.delete_cookie(ACCESS_COOKIE, path="/", secure=secure)
    response.delete_cookie(REFRESH_COOKIE, path="/", secure=secure)
    return response, status


@bp.patch("/changePassword")
@jwt_required()
def change_password():
    """
    Change password
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             oldPassword: { type: string }
             newPassword: { type: string }
    responses:
      200:
        description: OK
      401:
        description: Old password does not match
    """
    data = change_password_schema.load(request.get_json(silent=True) or {})
    _sessions().change_password(g.current_user.id, data["old_password"], data["new_password"])
    return api_response({}, "Password changed successfully")
