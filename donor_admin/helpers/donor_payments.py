"""Bulk updates of the payments a donor owns. The caller commits."""
from donor_admin.flask_essentials import database
from donor_admin.models.payment import PaymentModel


def reassign_payment_user( payment_ids, user_id ):
    """Set the owning user of every payment.

    :param list payment_ids: The payment IDs of the donor.
    :param int user_id: The new owning user, 0 to clear it.
    :return: The number of payments updated.
    """

    if not payment_ids:
        return 0
    return PaymentModel.query.filter( PaymentModel.id.in_( payment_ids ) )\
        .update( { PaymentModel.user_id: user_id }, synchronize_session=False )


def detach_payments( payment_ids ):
    """Clear the owning donor of every payment: the payments are kept."""

    if not payment_ids:
        return 0
    return PaymentModel.query.filter( PaymentModel.id.in_( payment_ids ) )\
        .update( { PaymentModel.donor_id: 0 }, synchronize_session=False )


def purge_payments( payment_ids ):
    """Delete every payment. This cannot be undone."""

    if not payment_ids:
        return 0
    deleted = PaymentModel.query.filter( PaymentModel.id.in_( payment_ids ) ).delete( synchronize_session=False )
    database.session.expire_all()
    return deleted
