from typing import Optional

from src.estransport.transport.errors import UrlError


def build_url(index: Optional[str], type_: Optional[str] = None, action: Optional[str] = None) -> str:
    """
    Join index, type and action into a request path.

    Segments are used as given, no URL encoding is applied.

    Raises:
        UrlError: if index is empty or missing
    """
    if not index:
        raise UrlError("index is required to build a path")

    if not type_:
        return f"{index}/{action}" if action else index
    return f"{index}/{type_}/{action}" if action else f"{index}/{type_}"
