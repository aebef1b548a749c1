"""Controllers for the donor admin resources: handle the business logic for the endpoints.

Validation and uniqueness checks all run before any write and raise the donor exceptions, so a rejected request never
changes state. A failure of the primary write is caught, rolled back and reported in the result. Cascades ( the linked
user address, the payments of the donor ) are only attempted once the primary write is committed; a failed cascade is
rolled back on its own and turns the result into a partial success.

Every operation returns a result dictionary:

    {
        "success": true,
        "message": "Donor updated.",
        "code": "donor-updated",
        "redirect": "/admin/donors?view=overview&id=5&give-message=...",
        "data": { ... },
        "partial_success": true,
        "cascade_failures": [ "payments" ]
    }

Only success and message are always present.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import SQLAlchemyError

from donor_admin.exceptions.exception_donor import DonorEmailDuplicateError
from donor_admin.exceptions.exception_donor import DonorEmailTakenError
from donor_admin.exceptions.exception_donor import DonorNotFoundError
from donor_admin.exceptions.exception_donor import DonorRequestError
from donor_admin.exceptions.exception_donor import DonorValidationError
from donor_admin.flask_essentials import database
from donor_admin.flask_essentials import hooks
from donor_admin.helpers.admin_url import donor_admin_url
from donor_admin.helpers.donor_address import get_user_address
from donor_admin.helpers.donor_address import merge_address
from donor_admin.helpers.donor_address import save_user_address
from donor_admin.helpers.donor_emails import add_email
from donor_admin.helpers.donor_emails import find_email_owner
from donor_admin.helpers.donor_emails import remove_email
from donor_admin.helpers.donor_emails import set_primary_email
from donor_admin.helpers.donor_notes import add_note
from donor_admin.helpers.donor_notes import format_note
from donor_admin.helpers.donor_payments import detach_payments
from donor_admin.helpers.donor_payments import purge_payments
from donor_admin.helpers.donor_payments import reassign_payment_user
from donor_admin.helpers.general_helper_functions import sanitize_email
from donor_admin.helpers.general_helper_functions import sanitize_text_field
from donor_admin.models.donor import DonorModel
from donor_admin.models.user import UserModel
from donor_admin.schemas.donor import DonorNoteSchema
from donor_admin.schemas.donor import DonorSchema
from donor_admin.schemas.donor_payload import DonorEditPayloadSchema

LOGGER = logging.getLogger( __name__ )

SYSTEM_ACTOR = 'System'


def get_donor_model( donor_id ):
    """Find the donor or raise DonorNotFoundError."""

    if not donor_id or int( donor_id ) <= 0:
        raise DonorNotFoundError()
    donor = DonorModel.query.filter_by( id=int( donor_id ) ).one_or_none()
    if not donor:
        raise DonorNotFoundError( donor_id )
    return donor


def build_result( success, message, code=None, redirect=None, data=None, cascade_failures=None ):
    """Build the result dictionary of an operation."""

    output = { 'success': success, 'message': message }
    if code:
        output[ 'code' ] = code
    if redirect:
        output[ 'redirect' ] = redirect
    if data is not None:
        output[ 'data' ] = data
    if cascade_failures:
        output[ 'partial_success' ] = True
        output[ 'cascade_failures' ] = cascade_failures
    return output


def run_cascade( name, cascade, *args ):
    """Apply and commit a cascade after the primary write. A failure is rolled back and logged.

    :param str name: The name reported in cascade_failures.
    :param cascade: The function applying the cascade to the session.
    :return: None on success, otherwise the name.
    """

    try:
        cascade( *args )
        database.session.commit()
    except SQLAlchemyError:
        database.session.rollback()
        LOGGER.exception( 'The %s cascade failed.', name )
        return name
    return None


def get_donor( donor_id ):
    """The donor overview: profile, emails, payments and the address of the linked user.

    :param int donor_id: The donor ID.
    :return: Serialized donor.
    """

    donor = get_donor_model( donor_id )
    donor_json = DonorSchema().dump( donor )
    donor_json[ 'address' ] = get_user_address( donor.linked_user_id ) if donor.linked_user_id else None
    return donor_json


def get_donor_notes( donor_id ):
    """The note timeline of the donor, oldest first."""

    donor = get_donor_model( donor_id )
    notes = DonorNoteSchema( many=True, only=[ 'id', 'date_in_utc', 'note' ] ).dump( donor.notes )
    for note_json, donor_note in zip( notes, donor.notes ):
        note_json[ 'display' ] = format_note( donor_note )
    return notes


def edit_donor( donor_id, payload ):
    """Edit the name and linked user of a donor, and the address of the linked user.

    payload = {
        "name": "Jane Doe",
        "user_id": 12,
        "city": "Austin"
    }

    When the linked user changes the new user must exist and must not be linked to another donor; the errors of both
    checks are collected before aborting. The address fields merge field by field with the address stored for the
    user. When the linked user changed, every payment of the donor is reassigned to the new user.

    The pre_edit_donor action fires before the write, post_edit_donor after it whether or not it succeeded. After a
    successful write post_edit_donor receives the donor data merged with the address, after a failure the donor data
    alone.

    :param int donor_id: The donor ID.
    :param dict payload: The fields to update.
    :return: The result dictionary, with name, user_id and address as data.
    """

    donor = get_donor_model( donor_id )
    donor_info = DonorEditPayloadSchema().load( payload or {} )
    user_id = donor_info[ 'user_id' ]

    errors = []
    if user_id != donor.linked_user_id and user_id:
        other_donor = DonorModel.query.filter( DonorModel.user_id == user_id, DonorModel.id != donor.id ).first()
        if other_donor:
            errors.append( {
                'code': 'duplicate-link',
                'message': 'The User ID #{} is already associated with a different donor.'.format( user_id )
            } )
        if database.session.get( UserModel, user_id ) is None:
            errors.append( {
                'code': 'invalid-account',
                'message': 'The User ID #{} does not exist. Please assign an existing user.'.format( user_id )
            } )
    if errors:
        raise DonorValidationError( errors )

    previous_user_id = donor.linked_user_id

    address = {}
    if user_id > 0:
        address = merge_address( donor_info, get_user_address( user_id ) )

    donor_data = { 'name': donor_info[ 'name' ], 'user_id': user_id }
    donor_data = hooks.apply_filters( 'edit_donor_info', donor_data, donor.id )
    address = hooks.apply_filters( 'edit_donor_address', address, donor.id )

    donor_data = { 'name': sanitize_text_field( donor_data[ 'name' ] ), 'user_id': int( donor_data[ 'user_id' ] or 0 ) }
    address = { field: sanitize_text_field( value ) for field, value in address.items() }

    hooks.do_action( 'pre_edit_donor', donor.id, donor_data, address )

    try:
        donor.name = donor_data[ 'name' ]
        donor.linked_user_id = donor_data[ 'user_id' ]
        database.session.commit()
    except IntegrityError:
        database.session.rollback()
        LOGGER.exception( 'Donor #%s could not be linked to user #%s.', donor_id, donor_data[ 'user_id' ] )
        output = build_result(
            False,
            'The User ID #{} is already associated with a different donor.'.format( donor_data[ 'user_id' ] ),
            code='duplicate-link'
        )
    except SQLAlchemyError:
        database.session.rollback()
        LOGGER.exception( 'Donor #%s could not be updated.', donor_id )
        output = build_result( False, 'Error updating donor.', code='write-failed' )
    else:
        cascade_failures = []
        if donor.linked_user_id > 0:
            cascade_failures.append( run_cascade( 'address', save_user_address, donor.linked_user_id, address ) )
        if donor.linked_user_id != previous_user_id:
            cascade_failures.append(
                run_cascade( 'payments', reassign_payment_user, donor.payment_id_list, donor.linked_user_id )
            )
        cascade_failures = [ failure for failure in cascade_failures if failure ]

        LOGGER.info( 'Donor #%s updated.', donor_id )
        donor_json = dict( donor_data )
        donor_json[ 'address' ] = address
        output = build_result(
            True,
            'Donor updated.',
            code='donor-updated',
            data=donor_json,
            cascade_failures=cascade_failures
        )
        hooks.do_action( 'post_edit_donor', donor_id, dict( donor_data, **address ) )
        return output

    hooks.do_action( 'post_edit_donor', donor_id, donor_data )

    return output


def add_donor_note( donor_id, note ):
    """Append a timestamped note to the donor.

    :param int donor_id: The donor ID.
    :param str note: The note text, sanitized before it is stored.
    :return: The result dictionary with the stored note as data.
    """

    note = sanitize_text_field( note )
    if not note:
        raise DonorValidationError( [ { 'code': 'empty-customer-note', 'message': 'A note is required.' } ] )

    donor = get_donor_model( donor_id )

    hooks.do_action( 'pre_insert_donor_note', donor.id, note )

    try:
        donor_note = add_note( donor, note )
        database.session.commit()
    except SQLAlchemyError:
        database.session.rollback()
        LOGGER.exception( 'A note could not be added to donor #%s.', donor_id )
        return build_result( False, 'Error saving the note.', code='write-failed' )

    note_json = DonorNoteSchema( only=[ 'id', 'date_in_utc', 'note' ] ).dump( donor_note )
    note_json[ 'display' ] = format_note( donor_note )
    return build_result( True, 'Note added.', code='note-added', data=note_json )


def delete_donor( donor_id, confirm_delete=False, purge_records=False ):
    """Delete a donor, then either delete or detach its payments.

    Deletion has to be confirmed. With purge_records the payments of the donor are deleted, otherwise their owning
    donor is cleared and they are kept. When deleting the donor fails the payments are left untouched.

    :param int donor_id: The donor ID.
    :param bool confirm_delete: The caller confirmed the deletion.
    :param bool purge_records: Delete the payments too.
    :return: The result dictionary.
    """

    if not confirm_delete:
        raise DonorValidationError(
            [ { 'code': 'customer-delete-no-confirm', 'message': 'Please confirm you want to delete this donor.' } ],
            redirect=donor_admin_url( 'overview', donor_id, 'customer-delete-no-confirm' )
        )

    donor = get_donor_model( donor_id )

    hooks.do_action( 'pre_delete_donor', donor.id, confirm_delete, purge_records )

    payment_ids = donor.payment_id_list
    try:
        database.session.delete( donor )
        database.session.commit()
    except SQLAlchemyError:
        database.session.rollback()
        LOGGER.exception( 'Donor #%s could not be deleted.', donor_id )
        return build_result(
            False,
            'Error deleting donor.',
            code='delete-failed',
            redirect=donor_admin_url( 'delete', donor_id )
        )

    if purge_records:
        cascade_failure = run_cascade( 'payments', purge_payments, payment_ids )
    else:
        cascade_failure = run_cascade( 'payments', detach_payments, payment_ids )

    LOGGER.info( 'Donor #%s deleted, payments %s.', donor_id, 'purged' if purge_records else 'detached' )
    return build_result(
        True,
        'Donor deleted.',
        code='customer-deleted',
        redirect=donor_admin_url( message='customer-deleted' ),
        cascade_failures=[ cascade_failure ] if cascade_failure else None
    )


def disconnect_donor_user( donor_id ):
    """Unlink the donor from its user and clear the owning user of its payments.

    :param int donor_id: The donor ID.
    :return: The result dictionary.
    """

    donor = get_donor_model( donor_id )
    user_id = donor.linked_user_id

    hooks.do_action( 'pre_donor_disconnect_user_id', donor.id, user_id )

    try:
        donor.linked_user_id = 0
        database.session.commit()
    except SQLAlchemyError:
        database.session.rollback()
        LOGGER.exception( 'Donor #%s could not be disconnected from user #%s.', donor_id, user_id )
        output = build_result( False, 'Failed to disconnect user from donor.', code='disconnect-failed' )
    else:
        cascade_failure = None
        payment_ids = donor.payment_id_list
        if payment_ids:
            cascade_failure = run_cascade( 'payments', reassign_payment_user, payment_ids, 0 )
        LOGGER.info( 'Donor #%s disconnected from user #%s.', donor_id, user_id )
        output = build_result(
            True,
            'User disconnected from donor.',
            code='user-disconnected',
            cascade_failures=[ cascade_failure ] if cascade_failure else None
        )

    hooks.do_action( 'post_donor_disconnect_user_id', donor_id )

    return output


def add_donor_email( donor_id, email, primary=False, actor=None ):
    """Add an email address to the donor and log who added it.

    :param int donor_id: The donor ID.
    :param str email: The email address.
    :param bool primary: Make the email the primary email of the donor.
    :param str actor: The login of the admin user, System when unknown.
    :return: The result dictionary with the email set as data.
    """

    if not email:
        raise DonorRequestError( 'Email address is required.' )
    if not donor_id:
        raise DonorRequestError( 'Donor ID is required.' )

    email = sanitize_email( email )
    donor = get_donor_model( donor_id )
    actor = actor or SYSTEM_ACTOR

    if donor.find_email( email ):
        raise DonorEmailDuplicateError( email )
    if find_email_owner( email ):
        raise DonorEmailTakenError( email )

    try:
        add_email( donor, email, primary )
        add_note( donor, 'Email address {} added by {}'.format( email, actor ) )
        if primary:
            add_note( donor, 'Email address {} set as primary by {}'.format( email, actor ) )
        database.session.commit()
    except IntegrityError:
        database.session.rollback()
        raise DonorEmailTakenError( email )

    hooks.do_action( 'post_add_donor_email', donor.id, email, primary )

    LOGGER.info( 'Email address %s added to donor #%s by %s.', email, donor_id, actor )
    return build_result(
        True,
        'Email successfully added to donor.',
        code='email-added',
        redirect=donor_admin_url( 'overview', donor.id, 'email-added' ),
        data={ 'emails': DonorSchema( only=[ 'emails' ] ).dump( donor )[ 'emails' ] }
    )


def remove_donor_email( donor_id, email, actor=None ):
    """Remove an email address from the donor and log who removed it.

    Removing the primary email promotes the oldest remaining email, which is logged as well.

    :param int donor_id: The donor ID.
    :param str email: The email address.
    :param str actor: The login of the admin user, System when unknown.
    :return: The result dictionary.
    """

    email = sanitize_email( email )
    donor = get_donor_model( donor_id )
    actor = actor or SYSTEM_ACTOR

    failure = build_result(
        False,
        'Failed to remove email.',
        code='email-remove-failed',
        redirect=donor_admin_url( 'overview', donor.id, 'email-remove-failed' )
    )

    donor_email = donor.find_email( email )
    if not donor_email:
        return failure

    try:
        promoted_email = remove_email( donor, donor_email )
        add_note( donor, 'Email address {} removed by {}'.format( email, actor ) )
        if promoted_email:
            add_note( donor, 'Email address {} set as primary by {}'.format( promoted_email.email, actor ) )
        database.session.commit()
    except SQLAlchemyError:
        database.session.rollback()
        LOGGER.exception( 'Email address %s could not be removed from donor #%s.', email, donor_id )
        return failure

    LOGGER.info( 'Email address %s removed from donor #%s by %s.', email, donor_id, actor )
    return build_result(
        True,
        'Email removed.',
        code='email-removed',
        redirect=donor_admin_url( 'overview', donor.id, 'email-removed' )
    )


def set_donor_primary_email( donor_id, email, actor=None ):
    """Make one of the email addresses of the donor its primary email and log who did it.

    :param int donor_id: The donor ID.
    :param str email: The email address, which must already belong to the donor.
    :param str actor: The login of the admin user, System when unknown.
    :return: The result dictionary.
    """

    email = sanitize_email( email )
    donor = get_donor_model( donor_id )
    actor = actor or SYSTEM_ACTOR

    failure = build_result(
        False,
        'Failed to set the primary email.',
        code='primary-email-failed',
        redirect=donor_admin_url( 'overview', donor.id, 'primary-email-failed' )
    )

    donor_email = donor.find_email( email )
    if not donor_email:
        return failure

    try:
        set_primary_email( donor, donor_email )
        add_note( donor, 'Email address {} set as primary by {}'.format( donor_email.email, actor ) )
        database.session.commit()
    except SQLAlchemyError:
        database.session.rollback()
        LOGGER.exception( 'Email address %s could not be set as primary for donor #%s.', email, donor_id )
        return failure

    LOGGER.info( 'Email address %s set as primary for donor #%s by %s.', email, donor_id, actor )
    return build_result(
        True,
        'Primary email updated.',
        code='primary-email-updated',
        redirect=donor_admin_url( 'overview', donor.id, 'primary-email-updated' )
    )
