from abc import ABC, abstractmethod


class BreachLookupError(RuntimeError):
    """Breach service could not give a definitive answer."""


class BreachProvider(ABC):

    @abstractmethod
    def check_password(self, password: str) -> dict:
        """
        Password must NEVER be stored, logged or transmitted.
        Uses k-anonymity: only a hash prefix leaves the process.

        Returns:
        {
          is_breached: bool,
          breach_count: int,
        }

        Raises BreachLookupError when the service is unavailable
        or answers with something unparseable.
        """
        pass
