from quotum.core.api.base import APIError, AuthExpiredError, BaseAPIClient
from quotum.core.api.contracts import PostReader, PostsPersistence, PostsProvider
from quotum.core.api.dashboard import DashboardClient

__all__ = [
    "APIError",
    "AuthExpiredError",
    "BaseAPIClient",
    "DashboardClient",
    "PostReader",
    "PostsPersistence",
    "PostsProvider",
]
