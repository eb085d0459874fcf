"""
Command-line interface for the CCRM platform.
"""

from .menu import MainMenu

__all__ = ["MainMenu"]
