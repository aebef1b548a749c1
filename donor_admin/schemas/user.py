"""Schemas for UserModel and UserAddressModel."""
# pylint: disable=too-few-public-methods
from donor_admin.flask_essentials import database
from donor_admin.flask_essentials import marshmallow
from donor_admin.models.user import UserAddressModel
from donor_admin.models.user import UserModel


class UserSchema( marshmallow.SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of UserModel."""

    class Meta:
        """Meta object for Marshmallow schema."""

        model = UserModel
        load_instance = True
        sqla_session = database.session


class UserAddressSchema( marshmallow.SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of UserAddressModel."""

    class Meta:
        """Meta object for Marshmallow schema."""

        model = UserAddressModel
        include_fk = True
        load_instance = True
        sqla_session = database.session
