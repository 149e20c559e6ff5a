"""
WhatsApp handoff link construction
"""
import re
from typing import Optional

WHATSAPP_BASE_URL = "https://wa.me/"

_NON_DIGITS = re.compile(r"\D")


def whatsapp_link(phone: Optional[str]) -> Optional[str]:
    """
    Build a https://wa.me/{phone} link.

    wa.me expects the number in international format with digits only, so
    '+91 98765-43210' becomes 'https://wa.me/919876543210'. Returns None when
    there is no number to contact.
    """
    if not phone:
        return None
    digits = _NON_DIGITS.sub("", phone)
    if not digits:
        return None
    return f"{WHATSAPP_BASE_URL}{digits}"
