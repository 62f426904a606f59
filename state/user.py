# state/user.py
from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str = ""
    picture: str = ""


def decode_jwt_payload(token: str) -> dict | None:
    """Decode the (unverified) payload segment of a JWT."""
    try:
        payload = token.split(".")[1]
        # restore the padding stripped by base64url encoding
        payload += "=" * (-len(payload) % 4)
        return json.loads(base64.urlsafe_b64decode(payload.encode("ascii")))
    except (IndexError, ValueError) as e:
        logging.error(f"Error decoding JWT: {e}")
        return None


def user_from_id_token(token: str) -> User | None:
    """Build a User from an identity token, None if the token is unusable."""
    data = decode_jwt_payload(token)
    if not isinstance(data, dict) or "sub" not in data:
        return None
    return User(
        id=str(data["sub"]),
        name=data.get("given_name") or data.get("name") or "",
        email=data.get("email", ""),
        picture=data.get("picture", ""),
    )


def local_user(name: str) -> User:
    """A user for terminal play, identified by name."""
    name = name.strip()
    return User(id=f"local:{name.lower()}", name=name)
