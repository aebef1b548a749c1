"""The models for the user accounts a donor can be linked to: user and user_address tables.

The address is stored against the user and not the donor, so whichever donor is linked to the user shares it.
"""
# pylint: disable=R0903
from donor_admin.flask_essentials import database

ADDRESS_FIELDS = ( 'line1', 'line2', 'city', 'state', 'zip', 'country' )


class UserModel( database.Model ):
    """A user account of the host site."""

    __tablename__ = 'user'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    user_login = database.Column( database.VARCHAR( 60 ), nullable=False, unique=True )
    display_name = database.Column( database.VARCHAR( 250 ), nullable=False, default='' )
    email = database.Column( database.VARCHAR( 100 ), nullable=False, default='' )
    address = database.relationship(
        'UserAddressModel',
        primaryjoin='UserModel.id == UserAddressModel.user_id',
        foreign_keys='UserAddressModel.user_id',
        uselist=False
    )


class UserAddressModel( database.Model ):
    """The postal address saved for a user."""

    __tablename__ = 'user_address'
    user_id = database.Column( database.Integer, database.ForeignKey( 'user.id' ), primary_key=True, nullable=False )
    line1 = database.Column( database.VARCHAR( 255 ), nullable=False, default='' )
    line2 = database.Column( database.VARCHAR( 255 ), nullable=False, default='' )
    city = database.Column( database.VARCHAR( 64 ), nullable=False, default='' )
    state = database.Column( database.VARCHAR( 64 ), nullable=False, default='' )
    zip = database.Column( database.VARCHAR( 16 ), nullable=False, default='' )
    country = database.Column( database.VARCHAR( 64 ), nullable=False, default='' )

    def to_dict( self ):
        """The address fields as a dictionary."""

        return { field: getattr( self, field ) for field in ADDRESS_FIELDS }
