"""confcheck - Schema-driven validation analyzer for configuration resources.

confcheck loads typed configuration resources, runs the validation function
registered for each kind and reports every warning and error it finds as a
structured diagnostic message.
"""

__version__ = "0.1.0"
__author__ = "confcheck"
__description__ = "Schema-driven validation analyzer for configuration resources"

from confcheck.config import ConfcheckConfig

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "ConfcheckConfig",
]
