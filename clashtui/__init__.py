"""clashtui - terminal dashboard for a clash/mihomo proxy service."""

__version__ = "0.1.0"
