import hashlib
import hmac
import string

_BASE36 = string.digits + string.ascii_uppercase


def _to_base36(number: int) -> str:
    if number == 0:
        return '0'
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return ''.join(reversed(digits))


def get_client_secret(client_id: str, server_secret: str) -> str:
    """Derive the 8-character join secret for ``client_id``.

    The sha256 digest of ``server_secret + client_id`` is read as one big
    integer and written in upper-case base36; the first 8 digits are kept.
    """
    digest = hashlib.sha256(f"{server_secret}{client_id}".encode('utf-8')).hexdigest()
    return _to_base36(int(digest, 16))[:8]


def secrets_match(given, expected) -> bool:
    if not isinstance(given, str) or not isinstance(expected, str):
        return False
    return hmac.compare_digest(given.encode('utf-8'), expected.encode('utf-8'))
