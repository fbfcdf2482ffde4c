"""
Clash controller API client

Talks to the RESTful external controller of a running clash/mihomo core.

Example:
    >>> from clashtui.api import ClashUtil
    >>>
    >>> api = ClashUtil('http://127.0.0.1:9090', secret='s3cret')
    >>> api.version()
    'Mihomo Meta v1.18.1'
    >>> api.config_patch({'mode': 'global'})
"""

from .client import ClashUtil
from .exceptions import ClashError, ClashAPIError

__all__ = [
    "ClashUtil",
    "ClashError",
    "ClashAPIError",
]
