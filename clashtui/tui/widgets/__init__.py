from .info import HelpPopup, InfoPopup
from .popup import ConfirmPopup, ListPopup, MsgPopup, MsgPopupMixin

__all__ = [
    "ConfirmPopup",
    "HelpPopup",
    "InfoPopup",
    "ListPopup",
    "MsgPopup",
    "MsgPopupMixin",
]
