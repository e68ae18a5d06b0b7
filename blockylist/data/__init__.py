"""Public façade for the blockylist.data package.

This module exposes the JSON-backed blocklist store. Callers should use this
façade instead of importing from the internal modules directly.
"""

from .blocklists import delete_blocklist, get_blocklist, load_blocklists, save_blocklist

__all__ = [
    "load_blocklists",
    "get_blocklist",
    "save_blocklist",
    "delete_blocklist",
]
