"""Exception handlers for the donor admin operations."""
# pylint: disable=too-few-public-methods


class DonorError( Exception ):
    """Base class for the donor exceptions: carries a message and a machine readable code."""

    code = 'donor-error'

    def __init__( self, message ):
        super().__init__( message )
        self.message = message


class DonorRequestError( DonorError ):
    """Exception for a request missing the donor ID or its payload."""

    code = 'bad-request'

    def __init__( self, message='The donor request is missing required data.' ):
        super().__init__( message )


class DonorNotFoundError( DonorError ):
    """Exception for a donor ID that does not resolve to a donor."""

    code = 'not-found'

    def __init__( self, donor_id=None ):
        super().__init__( 'Invalid Donor ID.' if donor_id is None else 'Donor #{} was not found.'.format( donor_id ) )
        self.donor_id = donor_id


class DonorValidationError( DonorError ):
    """Exception for a request that failed validation: no state was changed.

    The errors are accumulated before any write as a list of { 'code': ..., 'message': ... } dictionaries. The
    redirect, when set, is the admin screen browser-style callers are sent back to.
    """

    code = 'validation-failed'

    def __init__( self, errors, redirect=None ):
        if isinstance( errors, str ):
            errors = [ { 'code': self.code, 'message': errors } ]
        super().__init__( ' '.join( error[ 'message' ] for error in errors ) )
        self.errors = errors
        self.redirect = redirect


class DonorEmailInvalidError( DonorError ):
    """Exception for an email address that is not syntactically valid."""

    code = 'invalid-email'

    def __init__( self, email=None ):
        super().__init__( 'Invalid email.' )
        self.email = email


class DonorEmailDuplicateError( DonorError ):
    """Exception for an email address already on this donor."""

    code = 'duplicate-email'

    def __init__( self, email=None ):
        super().__init__( 'Email already associated with this donor.' )
        self.email = email


class DonorEmailTakenError( DonorError ):
    """Exception for an email address that belongs to a different donor."""

    code = 'email-taken'

    def __init__( self, email=None ):
        super().__init__( 'Email address is already associated with another donor.' )
        self.email = email
