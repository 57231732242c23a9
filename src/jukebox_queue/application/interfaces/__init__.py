"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and the remote catalog / accounts adapters.
"""

from jukebox_queue.application.interfaces.catalog_client import CatalogClient
from jukebox_queue.application.interfaces.token_exchanger import TokenExchanger

__all__ = [
    "CatalogClient",
    "TokenExchanger",
]
