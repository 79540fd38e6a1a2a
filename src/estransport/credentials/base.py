from abc import ABC, abstractmethod
from typing import Any, Dict

from src.estransport.credentials.localsettings.transportconfig import TransportConfig


class CredentialProvider(ABC):
    """Source of the settings a transport session is created from."""

    @abstractmethod
    def get_credentials(self) -> Dict[str, Any]:
        raise NotImplementedError("Subclasses must implement get_credentials")

    def get_config(self) -> TransportConfig:
        return TransportConfig(**self.get_credentials())
