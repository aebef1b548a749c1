"""Exception handlers for the authorization of admin requests: capabilities and anti-forgery tokens."""
# pylint: disable=too-few-public-methods


class AuthError( Exception ):
    """Base class for the authorization exceptions."""

    code = 'forbidden'


class CapabilityError( AuthError ):
    """Exception for an admin user missing the capability the endpoint requires."""

    code = 'missing-capability'

    def __init__( self, capability ):
        super().__init__()
        self.capability = capability
        self.message = 'You do not have permission to perform this donor action ( {} ).'.format( capability )


class NonceVerificationError( AuthError ):
    """Exception for a missing, expired or mismatched anti-forgery token."""

    code = 'nonce-failed'

    def __init__( self, purpose ):
        super().__init__()
        self.purpose = purpose
        self.message = 'Nonce verification failed.'
