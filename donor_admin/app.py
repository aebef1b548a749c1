"""The main application module with create_app(), resources and error handlers."""
import logging
from logging.config import dictConfig
import os

from flask import Flask
from flask import jsonify
from flask import redirect
from flask import request
from flask_restful import Api
from marshmallow.exceptions import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import SQLAlchemyError

import configuration
from configuration.config_loader import ConfigLoader
from donor_admin.exceptions.exception_auth import CapabilityError
from donor_admin.exceptions.exception_auth import NonceVerificationError
from donor_admin.exceptions.exception_donor import DonorEmailDuplicateError
from donor_admin.exceptions.exception_donor import DonorEmailInvalidError
from donor_admin.exceptions.exception_donor import DonorEmailTakenError
from donor_admin.exceptions.exception_donor import DonorNotFoundError
from donor_admin.exceptions.exception_donor import DonorRequestError
from donor_admin.exceptions.exception_donor import DonorValidationError
from donor_admin.flask_essentials import database
from donor_admin.flask_essentials import hooks
from donor_admin.flask_essentials import jwt
from donor_admin.flask_essentials import marshmallow
from donor_admin.logging_configuration import get_logging_configuration
from donor_admin.resources.donor import Donor
from donor_admin.resources.donor import DonorEmails
from donor_admin.resources.donor import DonorNonce
from donor_admin.resources.donor import DonorNotes
from donor_admin.resources.donor import DonorPrimaryEmail
from donor_admin.resources.donor import DonorUser
# pylint: disable=too-many-locals
# pylint: disable=too-many-statements


def create_app( app_config_env=None ):
    """Application factory.

    Allows the application to be instantiated with a specific configuration, e.g. configurations for development,
    testing, and production. The configuration loader augments the Flask app.config() with the DEFAULT section of
    conf.yml, the section for the configuration environment and the environment variables tagged with it. Manages
    the application logging level.

    :param str app_config_env: The configuration name to use in loading the configuration variables.
    :return: The Flask application.
    """

    # Set the APP_ENV variable in the Dockerfile. If we can't find a value set the app_config_env to DEFAULT.
    if not app_config_env:
        app_config_env = os.environ.get( 'APP_ENV', 'DEFAULT' )

    app = Flask( 'donor_admin' )

    conf_root = os.path.dirname( configuration.__file__ )
    config_loader = ConfigLoader()
    config_loader.update_from_yaml_file( os.path.join( conf_root, 'conf.yml' ), app_config_env )
    config_loader.update_from_env_variables( app_config_env )

    app.config.update( config_loader )
    app.config.update( { 'ENV': app_config_env } )

    wsgi_log_level = app.config.get( 'WSGI_LOG_LEVEL' ) or 'WARNING'
    gunicorn_log_level = app.config.get( 'GUNICORN_LOG_LEVEL' ) or 'WARNING'

    # If running gunicorn add gunicorn.error to handlers.
    gunicorn = 'gunicorn' in os.environ.get( 'SERVER_SOFTWARE', '' )

    dictConfig( get_logging_configuration( wsgi_log_level, gunicorn_log_level, gunicorn ) )
    logging.root.log( logging.root.level, '***** Logging is enabled for this level.' )
    logging.root.log( logging.root.level, '***** Configuration environment: %s', app_config_env )

    database.init_app( app )
    marshmallow.init_app( app )
    jwt.init_app( app )
    hooks.init_app( app )
    # Absolutely needed for JWT errors to work correctly in production.
    app.config.update( PROPAGATE_EXCEPTIONS=True )

    api = Api( app )

    api.add_resource( DonorNonce, '/donation/donors/nonce/<string:purpose>' )
    api.add_resource( Donor, '/donation/donors/<int:donor_id>' )
    api.add_resource( DonorNotes, '/donation/donors/<int:donor_id>/notes' )
    api.add_resource( DonorUser, '/donation/donors/<int:donor_id>/user' )
    api.add_resource( DonorEmails, '/donation/donors/<int:donor_id>/emails' )
    api.add_resource( DonorPrimaryEmail, '/donation/donors/<int:donor_id>/emails/primary' )

    @app.after_request
    def after_request( response ):  # pylint: disable=unused-variable
        """A handler for defining response headers.

        :param response: an HTTP response object
        :return:
        """

        response.headers.add( 'Access-Control-Allow-Origin', '*' )
        response.headers.add( 'Access-Control-Allow-Headers', 'Content-Type, Authorization, X-Donor-Nonce' )
        response.headers.add( 'Access-Control-Allow-Methods', 'GET, PUT, POST, DELETE' )
        return response

    @app.errorhandler( DonorRequestError )
    def handle_400( error ):  # pylint: disable=unused-variable
        """HTTP status 400 ( bad request ) error handler.

         :param error: Error message raised by exception.
         :return:
         """

        response = jsonify( handle_error_message( error ) )
        response.status_code = 400
        return response

    @app.errorhandler( CapabilityError )
    @app.errorhandler( NonceVerificationError )
    def handle_403( error ):  # pylint: disable=unused-variable
        """HTTP status 403 ( forbidden ) error handler.

         :param error: Error message raised by exception.
         :return:
         """

        response = jsonify( handle_error_message( error ) )
        response.status_code = 403
        return response

    @app.errorhandler( DonorNotFoundError )
    def handle_404( error ):  # pylint: disable=unused-variable
        """HTTP status 404 ( not found ) error handler.

        :param error: Error message raised by exception.
        :return:
        """

        response = jsonify( handle_error_message( error ) )
        response.status_code = 404
        return response

    @app.errorhandler( DonorEmailDuplicateError )
    @app.errorhandler( DonorEmailTakenError )
    def handle_409( error ):  # pylint: disable=unused-variable
        """HTTP status 409 ( conflict ) error handler.

        :param error: Error message raised by exception.
        :return:
        """

        response = jsonify( handle_error_message( error ) )
        response.status_code = 409
        return response

    @app.errorhandler( DonorValidationError )
    @app.errorhandler( DonorEmailInvalidError )
    @app.errorhandler( MarshmallowValidationError )
    def handle_422( error ):  # pylint: disable=unused-variable
        """HTTP status 422 ( unprocessable entity ) error handler.

        Browser-style callers are redirected when the error carries the admin screen to return to.

        :param error: Error message raised by exception.
        :return:
        """

        output = handle_error_message( error )
        best_match = request.accept_mimetypes.best_match( [ 'application/json', 'text/html' ] )
        if best_match == 'text/html' and output.get( 'redirect' ):
            return redirect( output[ 'redirect' ] )

        response = jsonify( output )
        response.status_code = 422
        return response

    @app.errorhandler( SQLAlchemyError )
    def handle_500( error ):  # pylint: disable=unused-variable
        """HTTP status 500 ( internal server error ) error handler.

        :param error: Error message raised by exception.
        :return:
        """

        database.session.rollback()
        response = jsonify( handle_error_message( error ) )
        response.status_code = 500
        return response

    def handle_error_message( error ):
        """Used by error handlers for building the failure payload from the error.

        :param error: The error raised by the exception.
        :return: The failure payload: success, message, code and the validation errors if any.
        """

        output = { 'success': False, 'code': getattr( error, 'code', 'error' ) }
        if isinstance( error, DonorValidationError ):
            output[ 'errors' ] = error.errors
            if error.redirect:
                output[ 'redirect' ] = error.redirect
        elif isinstance( error, MarshmallowValidationError ):
            output[ 'code' ] = 'validation-failed'
            output[ 'errors' ] = error.normalized_messages()

        if hasattr( error, 'message' ):
            output[ 'message' ] = error.message
        else:
            output[ 'message' ] = str( error )
        logging.exception( output[ 'message' ] )
        return output

    return app
