"""
contmon HTTP front-controller: router adapter and handler registration
"""

from .handlers import RegistrationError, register_all
from .mux import Mux

__all__ = ["Mux", "RegistrationError", "register_all"]
