from marshmallow import Schema, fields, pre_load, EXCLUDE


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class _InputSchema(Schema):
    """Input schemas only check shape; blank/missing checks belong to the services."""

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        if hasattr(data, "items"):
            # passwords are taken verbatim
            return {k: v if k.lower().endswith("password") else _strip(v) for k, v in data.items()}
        return data


class RegisterSchema(_InputSchema):
    full_name = fields.String(data_key="fullName", load_default=None)
    email = fields.String(load_default=None)
    username = fields.String(load_default=None)
    password = fields.String(load_default=None, load_only=True)


class LoginSchema(_InputSchema):
    username = fields.String(load_default=None, allow_none=True)
    email = fields.String(load_default=None, allow_none=True)
    password = fields.String(load_default=None, load_only=True)


class RefreshSchema(_InputSchema):
    refresh_token = fields.String(data_key="refreshToken", load_default=None, allow_none=True)


class ChangePasswordSchema(_InputSchema):
    old_password = fields.String(data_key="oldPassword", load_default=None)
    new_password = fields.String(data_key="newPassword", load_default=None)


class UpdateDetailsSchema(_InputSchema):
    full_name = fields.String(data_key="fullName", load_default=None)
    email = fields.String(load_default=None)


class AccountOutSchema(Schema):
    # password_hash and refresh_token are deliberately absent
    id = fields.String()
    username = fields.String()
    email = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
    cover_image = fields.String(data_key="coverImage")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class ChannelProfileOutSchema(Schema):
    id = fields.String()
    username = fields.String()
    email = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
    cover_image = fields.String(data_key="coverImage")
    subscribers_count = fields.Integer(data_key="subscribersCount")
    channels_subscribed_to_count = fields.Integer(data_key="channelsSubscribedToCount")
    is_subscribed = fields.Boolean(data_key="isSubscribed")
