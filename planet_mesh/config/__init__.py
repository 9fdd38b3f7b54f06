"""
Configuration for the mesh service.
"""

from .config import Settings, settings

__all__ = ['Settings', 'settings']
