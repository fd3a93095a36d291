import logging
from datetime import datetime, timedelta, timezone

from authlib.jose import JsonWebToken
from authlib.jose.errors import JoseError

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = timedelta(days=7)

# Only accept the algorithm we sign with
jwt = JsonWebToken(["HS256"])


def issue_token(user_id, secret_key: str, now: datetime | None = None) -> str:
    """Sign a session token for ``user_id`` valid for seven days."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + TOKEN_LIFETIME).timestamp()),
    }
    return jwt.encode({"alg": "HS256"}, payload, secret_key).decode("ascii")


def read_token(token: str, secret_key: str) -> str | None:
    """Return the user id a valid token was issued for, None otherwise."""
    try:
        claims = jwt.decode(token, secret_key)
        claims.validate()
    except JoseError as e:
        logger.debug(f"Rejected session token: {e}")
        return None
    return claims.get("sub")
