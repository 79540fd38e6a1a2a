from typing import Any, Dict

from .base import CredentialProvider
from src.estransport.credentials.localsettings.transportconfig import TransportConfig
from src.estransport.utils.reader import load_yml


class TransportCredentials(CredentialProvider):
    """
    Provides transport configuration values from the environment
    (TRANSPORT__* variables or a .env file).
    """

    def __init__(self):
        self.config = TransportConfig()

    def get_credentials(self) -> Dict[str, Any]:
        return self.config.model_dump()


class YamlTransportCredentials(CredentialProvider):
    """
    Provides transport configuration values from a YAML file.

    Example file:

        timeout: 10
        flush_response: true
        hosts:
          - host: http://es-1.internal
            port: 9200
          - host: http://es-2.internal
            port: 9200
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self.config = TransportConfig(**load_yml(file_path))

    def get_credentials(self) -> Dict[str, Any]:
        return self.config.model_dump()
