"""
vdtesting - Virtual device testing build step.

Uploads the app (and test) packages, starts a test run on a matrix of virtual
devices, waits for it to finish, prints the results and optionally downloads
the produced test assets.
"""

from .config import StepConfig
from .exceptions import ConfigValidationError, DataFormatError, ProtocolError, StepError, TransportError
from .runner import StepRunner
from .schemas import TestType

__version__ = "1.0.0"

__all__ = [
    "StepRunner",
    "StepConfig",
    "TestType",
    "StepError",
    "ConfigValidationError",
    "TransportError",
    "ProtocolError",
    "DataFormatError",
]
