import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone_number(number: str) -> str:
    """
    Reduce a phone number to its digits so numbers from different
    providers compare equal ('whatsapp:+91 98765-43210' -> '919876543210').
    """
    return _NON_DIGITS.sub("", number or "")
