"""Abstract interface for request authentication."""

from abc import ABC, abstractmethod


class AuthProvider(ABC):
    """Resolves the caller's identity from a request credential."""

    @abstractmethod
    def authenticate(self, authorization: str | None) -> str:
        """
        Resolves a stable user identifier from an Authorization header value.

        Args:
            authorization: The raw header value, possibly None.

        Returns:
            The user identifier.

        Raises:
            UnauthenticatedError: If the credential is missing or invalid.
        """
        pass
