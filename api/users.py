from __future__ import annotations

from flask import Blueprint, request, g, current_app

from api.responses import api_response
from models.schemas.account import UpdateDetailsSchema, AccountOutSchema, ChannelProfileOutSchema
from utils.decorators import jwt_required
from utils.media import save_upload, discard_upload

bp = Blueprint("users", __name__)

update_details_schema = UpdateDetailsSchema()
account_out_schema = AccountOutSchema()
channel_profile_out_schema = ChannelProfileOutSchema()


def _profiles():
    return current_app.extensions["profile_service"]


@bp.get("/current-user")
@jwt_required()
def current_user():
    """
    Get the calling account
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
    account = _profiles().current_account(g.current_user.id)
    return api_response(account_out_schema.dump(account), "Current user fetched successfully")


@bp.patch("/updateDetails")
@jwt_required()
def update_details():
    """
    Update full name and email
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
             fullName: { type: string }
             email: { type: string }
    responses:
      200: { description: OK }
      400: { description: Missing field }
    """
    data = update_details_schema.load(request.get_json(silent=True) or {})
    account = _profiles().update_details(g.current_user.id, data["full_name"], data["email"])
    return api_response(account_out_schema.dump(account), "Account details updated successfully")


def _replace_media(form_field: str, update):
    path = save_upload(request.files.get(form_field), current_app.config["UPLOAD_FOLDER"])
    try:
        account = update(g.current_user.id, path)
    finally:
        discard_upload(path)
    return account


@bp.patch("/changeAvatar")
@jwt_required()
def change_avatar():
    """
    Replace the avatar
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: avatar, type: file, required: true }
    responses:
      200: { description: OK }
      400: { description: Missing file or upload failed }
    """
    account = _replace_media("avatar", _profiles().update_avatar)
    return api_response(account_out_schema.dump(account), "Avatar updated successfully")


@bp.patch("/changeCoverImage")
@jwt_required()
def change_cover_image():
    """
    Replace the cover image
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: coverImage, type: file, required: true }
    responses:
      200: { description: OK }
      400: { description: Missing file or upload failed }
    """
    account = _replace_media("coverImage", _profiles().update_cover_image)
    return api_response(account_out_schema.dump(account), "Cover image updated successfully")


@bp.get("/c/<username>")
@jwt_required()
def channel_profile(username: str):
    """
    Channel profile with subscriber counts
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: username
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Channel does not exist }
    """
    profile = _profiles().channel_profile(username, viewer_id=g.current_user.id)
    return api_response(channel_profile_out_schema.dump(profile), "User channel fetched successfully")
