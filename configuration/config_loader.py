"""Loads the application configuration from conf.yml and from tagged environment variables."""
import logging
import os

import yaml


class ConfigLoader( dict ):
    """A dictionary of configuration values that Flask app.config can be updated with.

    Values are read first from the section of the YAML file named by the configuration environment, e.g. TEST, on top
    of the DEFAULT section. Environment variables tagged with the configuration environment then override them:
    TEST_SQLALCHEMY_DATABASE_URI=sqlite:// sets SQLALCHEMY_DATABASE_URI for the TEST configuration.
    """

    def update_from_yaml_file( self, file_path, app_config_env ):
        """Update the configuration from a section of a YAML file.

        :param str file_path: Path to the YAML file.
        :param str app_config_env: The section to load, e.g. DEFAULT, DEV, TEST or PROD.
        :return: The loader.
        """

        with open( file_path ) as yaml_file:
            sections = yaml.safe_load( yaml_file ) or {}

        self.update( sections.get( 'DEFAULT', {} ) )
        if app_config_env != 'DEFAULT':
            if app_config_env not in sections:
                logging.warning( 'Configuration section %s not found in %s.', app_config_env, file_path )
            self.update( sections.get( app_config_env ) or {} )
        return self

    def update_from_env_variables( self, app_config_env ):
        """Update the configuration from environment variables prefixed with the configuration environment.

        Values are parsed as YAML scalars so that integers and booleans keep their types.

        :param str app_config_env: The prefix, e.g. PROD for PROD_SECRET_KEY.
        :return: The loader.
        """

        prefix = '{}_'.format( app_config_env )
        for key, value in os.environ.items():
            if key.startswith( prefix ) and len( key ) > len( prefix ):
                self[ key[ len( prefix ): ] ] = yaml.safe_load( value ) if value else value
        return self
