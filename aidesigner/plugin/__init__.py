"""Plugin message surface: request contracts and the controller."""

from .lib import (
    GENERATION_ERRORS,
    NO_API_KEY_MESSAGE,
    PluginController,
    PostMessage,
    ProviderFactory,
    default_provider_factory,
)
from .messages import (
    KNOWN_REQUESTS,
    PluginRequest,
    RequestType,
    ResponseType,
    parse_request,
    response,
)

__all__ = [
    # Controller
    "PluginController",
    "PostMessage",
    "ProviderFactory",
    "default_provider_factory",
    "GENERATION_ERRORS",
    "NO_API_KEY_MESSAGE",
    # Messages
    "RequestType",
    "ResponseType",
    "PluginRequest",
    "KNOWN_REQUESTS",
    "parse_request",
    "response",
]
