from .base import TabBase
from .profile import ProfileTab
from .service import ServiceTab

__all__ = ["TabBase", "ProfileTab", "ServiceTab"]
