"""The base resource for donor admin endpoints: capability checks and anti-forgery token verification.

Authorization runs before the controller is called so that the controllers stay free of session state. Every method
of an AdminResource requires a valid JWT whose roles claim holds the capability configured for the method:

    class DonorNotes( AdminResource ):
        capability = 'DONOR_VIEW_CAPABILITY'

Mutating methods additionally verify the anti-forgery token issued for their purpose:

    @nonce_required( 'add-customer-note' )
    def post( self, donor_id ):
        ...
"""
# pylint: disable=too-few-public-methods
from functools import wraps

from flask import current_app
from flask import request
from flask_jwt_extended import get_jwt
from flask_jwt_extended import get_jwt_identity
from flask_jwt_extended import verify_jwt_in_request
from flask_restful import Resource

from donor_admin.exceptions.exception_auth import CapabilityError
from donor_admin.helpers.nonce import verify_nonce

NONCE_HEADER = 'X-Donor-Nonce'
NONCE_ARGUMENT = '_wpnonce'
SYSTEM_ACTOR = 'System'


def capability_required( capability_key ):
    """Decorator verifying the JWT and that its roles claim holds the capability named by the configuration key."""

    def decorator( function ):
        @wraps( function )
        def wrapper( *args, **kwargs ):
            verify_jwt_in_request()
            capability = current_app.config[ capability_key ]
            if capability not in ( get_jwt().get( 'roles' ) or [] ):
                raise CapabilityError( capability )
            return function( *args, **kwargs )
        return wrapper
    return decorator


def nonce_required( purpose ):
    """Decorator verifying the anti-forgery token of the request was issued for purpose. Fails closed."""

    def decorator( function ):
        @wraps( function )
        def wrapper( *args, **kwargs ):
            verify_nonce( get_request_nonce(), purpose, get_jwt_identity() )
            return function( *args, **kwargs )
        return wrapper
    return decorator


def get_request_nonce():
    """The token from the X-Donor-Nonce header, or the _wpnonce key of the payload or query string."""

    if request.headers.get( NONCE_HEADER ):
        return request.headers[ NONCE_HEADER ]
    return get_payload().get( NONCE_ARGUMENT )


def get_payload():
    """The query string arguments updated with the JSON body of the request."""

    payload = request.args.to_dict()
    json_payload = request.get_json( silent=True )
    if isinstance( json_payload, dict ):
        payload.update( json_payload )
    return payload


def get_actor():
    """The login of the admin user making the request, for audit notes."""

    return get_jwt().get( 'user_login' ) or SYSTEM_ACTOR


class AdminResource( Resource ):
    """Flask-RESTful resource requiring a capability for every method.

    The capability attribute names the configuration key of the default capability; capabilities maps a lowercase
    HTTP method to another key.
    """

    capability = 'DONOR_EDIT_CAPABILITY'
    capabilities = {}

    @property
    def method_decorators( self ):
        """The capability check for the method of the request."""

        capability_key = self.capabilities.get( request.method.lower(), self.capability )
        return [ capability_required( capability_key ) ]
