"""Flask extension instances shared across the application."""

from flask_bcrypt import Bcrypt

bcrypt = Bcrypt()
