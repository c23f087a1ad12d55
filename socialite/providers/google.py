"""Google (OpenID Connect userinfo v3)."""
from socialite.descriptor import ProviderDescriptor
from socialite.models import UserField

GOOGLE = ProviderDescriptor(
    name="google",
    display_name="Google",
    authorize_url="https://accounts.google.com/o/oauth2/auth",
    token_url="https://www.googleapis.com/oauth2/v4/token",
    user_url="https://www.googleapis.com/oauth2/v3/userinfo",
    default_scopes=("openid", "profile", "email"),
    scope_separator=" ",
    field_map=(
        ("sub", UserField.ID),
        ("nickname", UserField.NICKNAME),
        ("name", UserField.NAME),
        ("email", UserField.EMAIL),
        ("picture", UserField.AVATAR),
        ("picture", UserField.AVATAR_ORIGINAL),
    ),
)
