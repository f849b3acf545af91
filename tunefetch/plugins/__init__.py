"""Plugin system for media backends.

Plugins are catalog services that can be queried for tracks and that know
how to download or stream the media they list. Each plugin implements the
MediaPlugin interface and is registered by name on a PluginManager.
"""

from tunefetch.plugins.base import MediaPlugin
from tunefetch.plugins.manager import PluginManager

__all__ = [
    "MediaPlugin",
    "PluginManager",
]
