"""JWT credential verification using python-jose."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from lyntfeed.auth.base import Authenticator
from lyntfeed.config import FeedConfig
from lyntfeed.exceptions import InvalidCredential, MissingCredential


class JwtAuthenticator(Authenticator):
    """Verifies signed JWTs and reads the user id claim."""

    def __init__(self, secret: str, algorithm: str = "HS256", user_claim: str = "userId"):
        self.secret = secret
        self.algorithm = algorithm
        self.user_claim = user_claim

    @classmethod
    def from_config(cls, config: FeedConfig) -> "JwtAuthenticator":
        return cls(config.jwt_secret, config.jwt_algorithm, config.jwt_user_claim)

    async def verify(self, token: str | None) -> str:
        if not token:
            raise MissingCredential("No auth token")

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidCredential(f"Invalid JWT token: {e}") from e

        user_id = payload.get(self.user_claim)
        if not user_id:
            raise InvalidCredential(f"JWT token has no {self.user_claim} claim")
        return str(user_id)

    def issue(self, user_id: str, ttl_minutes: int = 60) -> str:
        """Sign a token for a user. Used by tooling and tests."""
        now = datetime.now(timezone.utc)
        claims = {
            self.user_claim: user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=ttl_minutes)).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)
