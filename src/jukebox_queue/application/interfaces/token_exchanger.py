"""Port interface for exchanging refresh credentials."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TokenExchanger(ABC):
    @abstractmethod
    async def exchange(self, refresh_token: str) -> str:
        """Trade a refresh credential for a fresh access credential.

        Raises:
            RemoteCallError: If the accounts service refuses or answers garbage.
        """
        ...
