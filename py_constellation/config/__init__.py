"""
Configuration for the constellation service.
"""

from .config import Settings, settings

__all__ = ['Settings', 'settings']
