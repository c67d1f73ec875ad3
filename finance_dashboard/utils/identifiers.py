import secrets
import string


def generate_custom_id(prefix: str, length: int = 10) -> str:
    random_part = ''.join(secrets.choice(string.ascii_uppercase + string.digits)
                          for _ in range(length))
    return f"{prefix}-{random_part}"
