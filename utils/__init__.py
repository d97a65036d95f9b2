"""
Utility modules for the distress scanner.
"""

from .formatting import format_aud
from .config import Config

__all__ = ["format_aud", "Config"]
