"""Build the URLs of the donor admin screens that browser-style callers are redirected to."""
from urllib.parse import urlencode

from flask import current_app

MESSAGE_ARGUMENT = 'give-message'


def donor_admin_url( view=None, donor_id=None, message=None ):
    """The donor admin URL for a view of a donor, carrying a status message code.

        donor_admin_url( 'overview', 5, 'email-added' )
        '/admin/donors?view=overview&id=5&give-message=email-added'

    :param str view: The screen, e.g. overview or delete.
    :param int donor_id: The donor the screen shows.
    :param str message: The message code to display.
    :return: The URL.
    """

    query = []
    if view:
        query.append( ( 'view', view ) )
    if donor_id:
        query.append( ( 'id', donor_id ) )
    if message:
        query.append( ( MESSAGE_ARGUMENT, message ) )

    base_url = current_app.config[ 'DONOR_ADMIN_URL' ]
    if not query:
        return base_url
    return '{}?{}'.format( base_url, urlencode( query ) )
