"""Schema for PaymentModel."""
# pylint: disable=too-few-public-methods
from marshmallow import fields

from donor_admin.flask_essentials import database
from donor_admin.flask_essentials import marshmallow
from donor_admin.models.payment import PaymentModel


class PaymentSchema( marshmallow.SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of PaymentModel."""

    amount = fields.Decimal( places=2, as_string=True, required=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = PaymentModel
        load_instance = True
        sqla_session = database.session
