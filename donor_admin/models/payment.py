"""The model for the donor admin service: payment table.

A payment is owned by a donor ( donor_id, 0 once detached ) and by the user the donor was linked to when it was
updated ( user_id, 0 when none ).
"""
# pylint: disable=R0903
from datetime import datetime

from donor_admin.flask_essentials import database


class PaymentModel( database.Model ):
    """A donation payment."""

    __tablename__ = 'payment'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    donor_id = database.Column( database.Integer, nullable=False, default=0, index=True )
    user_id = database.Column( database.Integer, nullable=False, default=0 )
    amount = database.Column( database.DECIMAL( 10, 2 ), nullable=False )
    status = database.Column(
        database.Enum( 'pending', 'publish', 'refunded', 'failed', 'cancelled', 'abandoned', native_enum=False ),
        default='publish',
        nullable=False
    )
    date_in_utc = database.Column( database.DateTime, nullable=False, default=datetime.utcnow )
