"""Schemas for DonorModel, DonorEmailModel and DonorNoteModel: the donor overview incorporates the email set."""
# pylint: disable=too-few-public-methods
from marshmallow import fields

from donor_admin.flask_essentials import database
from donor_admin.flask_essentials import marshmallow
from donor_admin.models.donor import DonorEmailModel
from donor_admin.models.donor import DonorModel
from donor_admin.models.donor import DonorNoteModel


class DonorEmailSchema( marshmallow.SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of DonorEmailModel."""

    class Meta:
        """Meta object for Marshmallow schema."""

        model = DonorEmailModel
        include_fk = True
        load_instance = True
        sqla_session = database.session


class DonorNoteSchema( marshmallow.SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of DonorNoteModel."""

    class Meta:
        """Meta object for Marshmallow schema."""

        model = DonorNoteModel
        include_fk = True
        load_instance = True
        sqla_session = database.session


class DonorSchema( marshmallow.SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of DonorModel.

    The user_id is 0 for an unlinked donor on both sides of the schema, and the legacy payment_ids column is dumped as a
    list of integers.
    """

    user_id = fields.Function(
        serialize=lambda donor: donor.linked_user_id,
        deserialize=lambda user_id: int( user_id ) or None,
        allow_none=True
    )
    purchase_value = fields.Decimal( places=2, as_string=True )
    payment_id_list = fields.List( fields.Integer(), dump_only=True )
    primary_email = fields.String( dump_only=True )
    emails = fields.List(
        fields.Nested( DonorEmailSchema, only=[ 'id', 'email', 'is_primary', 'date_created' ] ),
        dump_only=True
    )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = DonorModel
        load_instance = True
        sqla_session = database.session
