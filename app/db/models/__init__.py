from .user import User
from .site import Site
from .shift import Shift
from .guard_location import GuardLocation
from .alert import Alert

__all__ = ['User', 'Site', 'Shift', 'GuardLocation', 'Alert']
