"""The models for the donor admin service: donor, donor_email and donor_note tables.

Tables are explicitly named. Notice that the database=SQLAlchemy() is done through the import of flask_essentials. This
will keep the Marshmallow and model SQLAlchemy sessions the same.

A donor may be linked to one user account. Unlinked donors store NULL in user_id so that the unique constraint only
applies to linked donors; the API exposes an unlinked donor as user_id 0. The payment_ids column is the legacy comma
joined list of the payments the donor owns.
"""
# pylint: disable=R0903
from datetime import datetime

from donor_admin.flask_essentials import database


class DonorModel( database.Model ):
    """A donor ( customer ) aggregate: profile, linked user, emails, payments and notes."""

    __tablename__ = 'donor'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    user_id = database.Column( database.Integer, nullable=True, unique=True, default=None )
    name = database.Column( database.VARCHAR( 255 ), nullable=False, default='' )
    payment_ids = database.Column( database.Text, nullable=False, default='' )
    purchase_value = database.Column( database.DECIMAL( 10, 2 ), nullable=False, default=0 )
    purchase_count = database.Column( database.Integer, nullable=False, default=0 )
    date_created = database.Column( database.DateTime, nullable=False, default=datetime.utcnow )
    emails = database.relationship(
        'DonorEmailModel',
        order_by='DonorEmailModel.id',
        primaryjoin='DonorModel.id == DonorEmailModel.donor_id',
        foreign_keys='DonorEmailModel.donor_id',
        cascade='all, delete-orphan'
    )
    notes = database.relationship(
        'DonorNoteModel',
        order_by='DonorNoteModel.id',
        primaryjoin='DonorModel.id == DonorNoteModel.donor_id',
        foreign_keys='DonorNoteModel.donor_id',
        cascade='all, delete-orphan'
    )

    @property
    def linked_user_id( self ):
        """The linked user ID, 0 when the donor is not linked."""
        return self.user_id or 0

    @linked_user_id.setter
    def linked_user_id( self, user_id ):
        self.user_id = int( user_id ) if user_id else None

    @property
    def payment_id_list( self ):
        """The payment IDs of the legacy comma joined column, in order, as integers."""
        return [ int( payment_id ) for payment_id in ( self.payment_ids or '' ).split( ',' ) if payment_id.strip() ]

    @payment_id_list.setter
    def payment_id_list( self, payment_ids ):
        self.payment_ids = ','.join( str( payment_id ) for payment_id in payment_ids )

    @property
    def primary_email( self ):
        """The primary email address, None when the donor has no emails."""
        for donor_email in self.emails:
            if donor_email.is_primary:
                return donor_email.email
        return None

    @property
    def email_addresses( self ):
        """All email addresses of the donor in insertion order."""
        return [ donor_email.email for donor_email in self.emails ]

    def find_email( self, email ):
        """Return the DonorEmailModel of the donor for the address, matched case-insensitively."""

        for donor_email in self.emails:
            if donor_email.email.lower() == email.lower():
                return donor_email
        return None


class DonorEmailModel( database.Model ):
    """An email address of a donor. An address belongs to at most one donor."""

    __tablename__ = 'donor_email'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    donor_id = database.Column( database.Integer, database.ForeignKey( 'donor.id' ), nullable=False, index=True )
    email = database.Column( database.VARCHAR( 255 ), nullable=False, unique=True )
    is_primary = database.Column( database.Boolean, nullable=False, default=False )
    date_created = database.Column( database.DateTime, nullable=False, default=datetime.utcnow )


class DonorNoteModel( database.Model ):
    """An entry of the append only note log of a donor."""

    __tablename__ = 'donor_note'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    donor_id = database.Column( database.Integer, database.ForeignKey( 'donor.id' ), nullable=False, index=True )
    date_in_utc = database.Column( database.DateTime, nullable=False, default=datetime.utcnow )
    note = database.Column( database.Text, nullable=False )
