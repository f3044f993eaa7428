"""External client interfaces."""

from abc import ABC, abstractmethod


class NotificationClient(ABC):
    """
    Abstract client for delivering approval codes to buyers.

    Production deployments back this with an SMS/notification provider.
    """

    @abstractmethod
    async def send_code(self, destination: str, code: str) -> bool:
        """
        Deliver a one-time approval code out-of-band.

        Args:
            destination: Identifier of the recipient (the buyer id)
            code: The one-time code to deliver

        Returns:
            True if the code was handed to the provider successfully
        """
        ...
