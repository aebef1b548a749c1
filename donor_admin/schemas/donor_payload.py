"""Marshmallow schemas validating the payloads of the donor admin endpoints.

Unknown keys, e.g. the _wpnonce anti-forgery token, are excluded. Address fields have no default: a field missing from
the loaded payload was not supplied by the caller, which the address merge depends on.
"""
# pylint: disable=too-few-public-methods
from marshmallow import EXCLUDE
from marshmallow import fields
from marshmallow import pre_load
from marshmallow import Schema


def parse_primary( value ):
    """Only the boolean true or the string 'true' request a primary email."""
    return value is True or value == 'true'


class DonorEditPayloadSchema( Schema ):
    """Payload for editing a donor: name, linked user and address fields."""

    name = fields.String( load_default='' )
    user_id = fields.Integer( load_default=0 )
    line1 = fields.String()
    line2 = fields.String()
    city = fields.String()
    state = fields.String()
    zip = fields.String()
    country = fields.String()

    @pre_load
    def clear_empty_user_id( self, data, **kwargs ):  # pylint: disable=unused-argument
        """A form clearing the user field posts the empty string, which unlinks the donor like 0 does."""

        if 'user_id' in data and ( data[ 'user_id' ] is None or str( data[ 'user_id' ] ).strip() == '' ):
            data = dict( data, user_id=0 )
        return data

    class Meta:
        """Meta object for Marshmallow schema."""

        unknown = EXCLUDE


class DonorNotePayloadSchema( Schema ):
    """Payload for adding a donor note."""

    note = fields.String( load_default='' )

    class Meta:
        """Meta object for Marshmallow schema."""

        unknown = EXCLUDE


class DonorDeletePayloadSchema( Schema ):
    """Payload for deleting a donor: both flags are off unless supplied."""

    confirm_delete = fields.Boolean( load_default=False )
    purge_records = fields.Boolean( load_default=False )

    class Meta:
        """Meta object for Marshmallow schema."""

        unknown = EXCLUDE


class DonorEmailPayloadSchema( Schema ):
    """Payload for adding, removing or promoting a donor email."""

    email = fields.String( required=True )
    primary = fields.Function( deserialize=parse_primary, load_default=False )

    class Meta:
        """Meta object for Marshmallow schema."""

        unknown = EXCLUDE
