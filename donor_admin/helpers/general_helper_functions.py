"""A Module for general helper functions used across the application: sanitizing text and email addresses."""
import re

from email_validator import EmailNotValidError
from email_validator import validate_email
from markupsafe import Markup

from donor_admin.exceptions.exception_donor import DonorEmailInvalidError

INVALID_UTF8_OCTETS = re.compile( r'%[a-f0-9]{2}', re.IGNORECASE )


def sanitize_text_field( text ):
    """Strip tags, line breaks, tabs, percent encoded octets and extra whitespace from user supplied text.

    :param text: The text to sanitize. None is treated as the empty string.
    :return: The sanitized text.
    """

    if text is None:
        return ''
    # striptags() collapses whitespace and unescapes entities, which can yield new tags: repeat until stable.
    text = str( text )
    stripped_text = Markup( text ).striptags()
    while stripped_text != text:
        text = stripped_text
        stripped_text = Markup( text ).striptags()
    text = INVALID_UTF8_OCTETS.sub( '', text )
    return text.strip()


def sanitize_email( email ):
    """Validate and normalize an email address.

    :param email: The email address supplied by the caller.
    :return: The normalized email address.
    :raises DonorEmailInvalidError: When the address is not syntactically valid.
    """

    if not email or not isinstance( email, str ):
        raise DonorEmailInvalidError( email )
    try:
        validated_email = validate_email( email.strip(), check_deliverability=False )
    except EmailNotValidError:
        raise DonorEmailInvalidError( email )
    return validated_email.normalized
