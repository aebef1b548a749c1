"""The WSGI entry point: gunicorn donor_admin.wsgi:donation_app"""
import logging

from donor_admin.app import create_app

donation_app = create_app()  # pylint: disable=invalid-name

if __name__ != '__main__':
    gunicorn_logger = logging.getLogger( 'gunicorn.error' )  # pylint: disable=invalid-name
    donation_app.logger.handlers = gunicorn_logger.handlers
    donation_app.logger.setLevel( gunicorn_logger.level )

if __name__ == '__main__':
    donation_app.run( host="127.0.0.1", port=5000, debug=True )
