"""Resources entry point for the donor admin endpoints."""
# pylint: disable=no-self-use
from flask import redirect
from flask import request
from flask_jwt_extended import get_jwt_identity

from donor_admin.controllers.donor import add_donor_email
from donor_admin.controllers.donor import add_donor_note
from donor_admin.controllers.donor import delete_donor
from donor_admin.controllers.donor import disconnect_donor_user
from donor_admin.controllers.donor import edit_donor
from donor_admin.controllers.donor import get_donor
from donor_admin.controllers.donor import get_donor_notes
from donor_admin.controllers.donor import remove_donor_email
from donor_admin.controllers.donor import set_donor_primary_email
from donor_admin.exceptions.exception_donor import DonorRequestError
from donor_admin.helpers.nonce import create_nonce
from donor_admin.helpers.nonce import NONCE_PURPOSES
from donor_admin.resources.admin_resource import AdminResource
from donor_admin.resources.admin_resource import get_actor
from donor_admin.resources.admin_resource import get_payload
from donor_admin.resources.admin_resource import nonce_required
from donor_admin.schemas.donor_payload import DonorDeletePayloadSchema
from donor_admin.schemas.donor_payload import DonorEmailPayloadSchema
from donor_admin.schemas.donor_payload import DonorNotePayloadSchema

# Failed results that are the caller's fault rather than the server's.
FAILURE_STATUS_CODES = {
    'duplicate-link': 409,
    'email-remove-failed': 422,
    'primary-email-failed': 422
}


def respond( output, success_status_code=200 ):
    """Return the result of a controller to the caller.

    Browser-style callers ( Accept preferring text/html ) are redirected to the admin screen carrying the message code,
    other callers receive the result as JSON.

    :param dict output: The result dictionary.
    :param int success_status_code: The HTTP status code of a successful result.
    :return: The response.
    """

    best_match = request.accept_mimetypes.best_match( [ 'application/json', 'text/html' ] )
    if best_match == 'text/html' and output.get( 'redirect' ):
        return redirect( output[ 'redirect' ] )

    if output[ 'success' ]:
        return output, success_status_code
    return output, FAILURE_STATUS_CODES.get( output.get( 'code' ), 500 )


class DonorNonce( AdminResource ):
    """Flask-RESTful resource endpoint issuing anti-forgery tokens for the donor admin forms."""

    capability = 'DONOR_VIEW_CAPABILITY'

    def get( self, purpose ):
        """Issue a token for the purpose, bound to the admin user.

        :param str purpose: One of the donor admin purposes, e.g. edit-customer.
        :return: The token.
        """

        if purpose not in NONCE_PURPOSES:
            raise DonorRequestError( 'Unknown nonce purpose: {}.'.format( purpose ) )
        return { 'purpose': purpose, 'nonce': create_nonce( purpose, get_jwt_identity() ) }, 200


class Donor( AdminResource ):
    """Flask-RESTful resource endpoints to view, edit and delete a donor."""

    capabilities = { 'get': 'DONOR_VIEW_CAPABILITY' }

    def get( self, donor_id ):
        """The donor overview."""

        return get_donor( donor_id ), 200

    @nonce_required( 'edit-customer' )
    def put( self, donor_id ):
        """Edit the name, linked user and address of the donor.

        payload = {
            "name": "Jane Doe",
            "user_id": 12,
            "line1": "1 Main St",
            "city": "Austin",
            "_wpnonce": "..."
        }
        """

        return respond( edit_donor( donor_id, get_payload() ) )

    @nonce_required( 'delete-customer' )
    def delete( self, donor_id ):
        """Delete the donor.

        payload = {
            "confirm_delete": true,
            "purge_records": false,
            "_wpnonce": "..."
        }
        """

        payload = DonorDeletePayloadSchema().load( get_payload() )
        return respond( delete_donor( donor_id, payload[ 'confirm_delete' ], payload[ 'purge_records' ] ) )


class DonorNotes( AdminResource ):
    """Flask-RESTful resource endpoints for the note log of a donor."""

    capability = 'DONOR_VIEW_CAPABILITY'

    def get( self, donor_id ):
        """The notes of the donor, oldest first."""

        return get_donor_notes( donor_id ), 200

    @nonce_required( 'add-customer-note' )
    def post( self, donor_id ):
        """Add a note to the donor."""

        payload = DonorNotePayloadSchema().load( get_payload() )
        return respond( add_donor_note( donor_id, payload[ 'note' ] ), 201 )


class DonorUser( AdminResource ):
    """Flask-RESTful resource endpoint for the user a donor is linked to."""

    @nonce_required( 'edit-customer' )
    def delete( self, donor_id ):
        """Disconnect the donor from its user."""

        return respond( disconnect_donor_user( donor_id ) )


class DonorEmails( AdminResource ):
    """Flask-RESTful resource endpoints for the email addresses of a donor."""

    @nonce_required( 'give_add_donor_email' )
    def post( self, donor_id ):
        """Add an email address to the donor.

        payload = {
            "email": "jane@doe.org",
            "primary": "true",
            "_wpnonce": "..."
        }
        """

        payload = DonorEmailPayloadSchema().load( get_payload() )
        return respond( add_donor_email( donor_id, payload[ 'email' ], payload[ 'primary' ], get_actor() ), 201 )

    @nonce_required( 'give-remove-donor-email' )
    def delete( self, donor_id ):
        """Remove an email address from the donor."""

        payload = DonorEmailPayloadSchema().load( get_payload() )
        return respond( remove_donor_email( donor_id, payload[ 'email' ], get_actor() ) )


class DonorPrimaryEmail( AdminResource ):
    """Flask-RESTful resource endpoint for the primary email address of a donor."""

    @nonce_required( 'give-set-donor-primary-email' )
    def put( self, donor_id ):
        """Make one of the email addresses of the donor its primary email."""

        payload = DonorEmailPayloadSchema().load( get_payload() )
        return respond( set_donor_primary_email( donor_id, payload[ 'email' ], get_actor() ) )
