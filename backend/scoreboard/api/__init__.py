"""HTTP blueprints, all mounted under ``/api``."""

from .auth import auth
from .scores import scores
from .users import users

ALL_BLUEPRINTS = (auth, users, scores)

__all__ = ['ALL_BLUEPRINTS']
