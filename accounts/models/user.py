from mongoengine import BooleanField, EmailField, StringField

from accounts.models.base import BaseDocument
from accounts.utils.base import Subscription


class User(BaseDocument):
    """User document.

    Fields:
    - email (str, unique): Login identifier
    - password (str, hashed): Bcrypt-hashed password, never serialized
    - subscription (str): starter/pro/business
    - avatar_url (str): Gravatar URL until an avatar is uploaded, then ``avatars/<file>``
    - token (str): Unused by the session flow; tokens are stateless JWTs
    - verify (bool): Whether the email address has been confirmed
    - verification_token (str): Correlates the verification email link to the account

    The unique index on ``email`` is what closes the register race, two
    concurrent sign-ups for one address cannot both be inserted.
    """
    email = EmailField(required=True, null=False, unique=True)
    password = StringField(required=True, null=False)
    subscription = StringField(
        required=True,
        null=False,
        choices=Subscription.values(),
        default=Subscription.STARTER.value,
    )
    avatar_url = StringField(required=False, null=True, db_field="avatarURL")
    token = StringField(required=False, null=False, default="")
    verify = BooleanField(required=True, null=False, default=False)
    verification_token = StringField(required=True, null=False, db_field="verificationToken")

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "unique": True},
        ],
    }

    def to_profile(self) -> dict:
        return {
            "email": self.email,
            "subscription": self.subscription,
            "avatarURL": self.avatar_url,
        }
