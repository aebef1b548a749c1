"""Handles the address of the user a donor is linked to, including the field level merge of partial updates."""
from donor_admin.flask_essentials import database
from donor_admin.models.user import ADDRESS_FIELDS
from donor_admin.models.user import UserAddressModel


def merge_address( patch, current_address=None ):
    """Merge the address fields of a patch with the address stored for the user.

    With no stored address every field comes from the patch, defaulting to the empty string. With a stored address
    each field comes from the patch if the patch supplies it ( the empty string included ) and otherwise falls back to
    the stored value of that field. A field the caller did not touch is never blanked.

        merge_address( { 'city': 'Austin' }, { 'city': 'Reno', 'zip': '89501' } )
        { 'line1': '', 'line2': '', 'city': 'Austin', 'state': '', 'zip': '89501', 'country': '' }

    :param dict patch: The payload, possibly holding any of the address fields.
    :param dict current_address: The stored address, or None.
    :return: The merged address with all six fields.
    """

    address = {}
    for field in ADDRESS_FIELDS:
        if patch.get( field ) is not None:
            address[ field ] = patch[ field ]
        elif current_address is None:
            address[ field ] = ''
        else:
            address[ field ] = current_address.get( field ) or ''
    return address


def get_user_address( user_id ):
    """The stored address of the user as a dictionary, None when no address was ever saved."""

    address_model = database.session.get( UserAddressModel, user_id )
    if address_model is None:
        return None
    return address_model.to_dict()


def save_user_address( user_id, address ):
    """Create or overwrite the address of the user. The caller commits."""

    address_model = database.session.get( UserAddressModel, user_id )
    if address_model is None:
        address_model = UserAddressModel( user_id=user_id )
        database.session.add( address_model )
    for field in ADDRESS_FIELDS:
        setattr( address_model, field, address.get( field, '' ) )
    return address_model
