"""Core utilities: logging, exceptions, results."""

from earncal.core.exceptions import EarncalError, ErrorKind
from earncal.core.logging import get_logger, setup_logging
from earncal.core.result import Err, Ok, Result

__all__ = [
    "EarncalError",
    "Err",
    "ErrorKind",
    "Ok",
    "Result",
    "get_logger",
    "setup_logging",
]
