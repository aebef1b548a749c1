"""Create instantiations of SQLAlchemy, Marshmallow, the JWT manager and the donor hooks: helps to synchronize sessions."""
from flask_jwt_extended import JWTManager
from flask_marshmallow import Marshmallow
from flask_sqlalchemy import SQLAlchemy

from donor_admin.helpers.donor_hooks import DonorHooks

database = SQLAlchemy()  # pylint: disable=invalid-name
marshmallow = Marshmallow()  # pylint: disable=invalid-name
jwt = JWTManager()  # pylint: disable=invalid-name
hooks = DonorHooks()  # pylint: disable=invalid-name
