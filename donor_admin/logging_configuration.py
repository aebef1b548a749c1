"""The logging configuration for the donor admin application."""

LOG_FORMAT = '%(levelname)-5s [%(filename)s:%(funcName)s:%(lineno)d] %(message)s'


def get_logging_configuration( wsgi_level, gunicorn_level, gunicorn=False, error_log='errors.log' ):
    """"Return a dictionary to build the logging configuration.

    The donor_admin logger carries the audit of every donor mutation ( edits, deletions, email changes ) and the
    cascade failures. It shares the stdout handler with the root logger.

    :param str wsgi_level: Level for the root and donor_admin loggers.
    :param str gunicorn_level: Level for the gunicorn.error logger.
    :param bool gunicorn: Whether the application is served by gunicorn.
    :param str error_log: The file the gunicorn.error handler writes to.
    :return: A dictConfig dictionary.
    """

    logging_configuration = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'default': { 'format': LOG_FORMAT }
        },
        'handlers': {
            'wsgi': { 'class': 'logging.StreamHandler', 'stream': 'ext://sys.stdout', 'formatter': 'default' }
        },
        'loggers': {
            'wsgi': { 'level': wsgi_level, 'propagate': False, 'handlers': [ 'wsgi' ] },
            'donor_admin': { 'level': wsgi_level, 'propagate': False, 'handlers': [ 'wsgi' ] }
        },
        'root': {
            'level': wsgi_level,
            'handlers': [ 'wsgi' ]
        }
    }
    if gunicorn:
        logging_configuration[ 'handlers' ][ 'gunicorn.error' ] = {
            'class': 'logging.FileHandler', 'filename': error_log, 'formatter': 'default', 'delay': True
        }
        logging_configuration[ 'loggers' ][ 'gunicorn.error' ] = {
            'level': gunicorn_level, 'propagate': False, 'handlers': [ 'gunicorn.error' ]
        }
        logging_configuration[ 'loggers' ][ 'donor_admin' ][ 'handlers' ].append( 'gunicorn.error' )
        logging_configuration[ 'root' ][ 'handlers' ].append( 'gunicorn.error' )

    return logging_configuration
