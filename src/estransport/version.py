__version__ = "0.1.0"

USER_AGENT = f"estransport/{__version__}"
