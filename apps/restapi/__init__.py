from .client import CredentialProvider, FetchResult, RestaurantApiClient
from .errors import ApiError, ApiPayloadError, ApiStatusError, ApiTransportError

__all__ = [
    "ApiError",
    "ApiPayloadError",
    "ApiStatusError",
    "ApiTransportError",
    "CredentialProvider",
    "FetchResult",
    "RestaurantApiClient",
]
