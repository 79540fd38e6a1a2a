from .transport import TransportCredentials, YamlTransportCredentials

class CredentialFactory:
    """
    Decides which 'Source' to use for transport configuration.
    """
    @staticmethod
    def get_provider(mode: str, path: str = None):
        if mode == "transportlocal":
            return TransportCredentials()

        elif mode == "yaml":
            if not path:
                raise ValueError("A configuration file path is required for mode 'yaml'.")
            return YamlTransportCredentials(path)

        else:
            raise ValueError(f"Unknown mode: {mode}. Use 'transportlocal' or 'yaml'.")
