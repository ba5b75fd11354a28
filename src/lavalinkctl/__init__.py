"""
lavalinkctl - Lavalink sidecar container lifecycle manager
"""

__version__ = "0.1.0"

from .core import SidecarError, SidecarManager

__all__ = ["SidecarManager", "SidecarError"]
