"""Abstract credential verifier."""

from abc import ABC, abstractmethod


class Authenticator(ABC):
    """Turns an opaque bearer credential into a user id."""

    @abstractmethod
    async def verify(self, token: str | None) -> str:
        """
        Verify a credential.

        Args:
            token: Credential from the auth cookie, None if absent

        Returns:
            Authenticated user id

        Raises:
            MissingCredential: If no token was supplied
            InvalidCredential: If the token does not verify
        """
        ...
