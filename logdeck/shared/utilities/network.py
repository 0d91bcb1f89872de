# Path: logdeck/shared/utilities/network.py
import base64
import binascii
from typing import Optional, Tuple

from starlette.requests import HTTPConnection


def extract_client_ip(connection: HTTPConnection) -> str:
    """Remote address of the peer as seen by the socket.

    Forwarding headers are not consulted.
    """
    if connection.client is None:
        return ""
    return connection.client.host


def parse_basic_auth(header: Optional[str]) -> Optional[Tuple[str, str]]:
    """Decode an ``Authorization: Basic ...`` header into (user, password).

    Returns None when the header is missing or malformed.
    """
    if not header:
        return None
    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    if ":" not in decoded:
        return None
    user, _, password = decoded.partition(":")
    return user, password
