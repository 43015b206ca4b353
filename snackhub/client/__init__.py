from snackhub.client.api import ApiClient, ApiError
from snackhub.client.session import (
    SessionManager,
    SessionState,
    TokenStore,
    MemoryTokenStore,
    FileTokenStore,
    is_public_path,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "SessionManager",
    "SessionState",
    "TokenStore",
    "MemoryTokenStore",
    "FileTokenStore",
    "is_public_path",
]
