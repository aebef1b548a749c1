"""Anti-forgery tokens ( nonces ) bound to an operation purpose and to the identity of the admin user.

A token is signed with the application SECRET_KEY and salted with its purpose, so a token issued for edit-customer
cannot be replayed against delete-customer. Tokens expire after NONCE_MAX_AGE_SECONDS.
"""
from flask import current_app
from itsdangerous import BadSignature
from itsdangerous import URLSafeTimedSerializer

from donor_admin.exceptions.exception_auth import NonceVerificationError

NONCE_PURPOSES = (
    'edit-customer',
    'delete-customer',
    'add-customer-note',
    'give_add_donor_email',
    'give-remove-donor-email',
    'give-set-donor-primary-email'
)


def get_nonce_serializer():
    """The serializer for the application in context."""

    return URLSafeTimedSerializer( current_app.config[ 'SECRET_KEY' ], salt='donor-admin-nonce' )


def create_nonce( purpose, identity ):
    """Issue a token for the purpose and identity."""

    return get_nonce_serializer().dumps( { 'identity': identity }, salt=purpose )


def verify_nonce( token, purpose, identity ):
    """Verify the token was issued for the purpose and identity and has not expired.

    :raises NonceVerificationError: On any mismatch.
    """

    if not token:
        raise NonceVerificationError( purpose )
    try:
        nonce_data = get_nonce_serializer().loads(
            token, salt=purpose, max_age=current_app.config[ 'NONCE_MAX_AGE_SECONDS' ]
        )
    except BadSignature:
        raise NonceVerificationError( purpose )
    if not isinstance( nonce_data, dict ) or nonce_data.get( 'identity' ) != identity:
        raise NonceVerificationError( purpose )
    return True
