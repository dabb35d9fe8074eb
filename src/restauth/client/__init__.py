from restauth.client.api import RequestConfig, RequestGateway
from restauth.client.auth import AuthAuthority, TokenAuthority
from restauth.client.token_store import InMemoryTokenStore, TokenStore

__all__ = [
    "AuthAuthority",
    "InMemoryTokenStore",
    "RequestConfig",
    "RequestGateway",
    "TokenAuthority",
    "TokenStore",
]
