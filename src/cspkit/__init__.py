"""Content-Security-Policy tokenizer and source matching."""

from .policy import *  # noqa: F401,F403
from .policy import __all__

__version__ = "0.1.0"
