from services.hih_gateway.client import (
    HIHGatewayClient,
    HIHGatewayConfig,
    HIHGatewayError,
    HIHSubmissionResult,
    get_gateway_config,
)
from services.hih_gateway.mapping import build_submission_payload
from services.hih_gateway.token_cache import TokenCache

# Shared by every request so tokens survive between submissions
gateway_token_cache = TokenCache()


def get_gateway_client() -> HIHGatewayClient:
    """FastAPI dependency providing a gateway client backed by the shared token cache."""
    return HIHGatewayClient(token_cache=gateway_token_cache)


__all__ = [
    "HIHGatewayClient",
    "HIHGatewayConfig",
    "HIHGatewayError",
    "HIHSubmissionResult",
    "TokenCache",
    "build_submission_payload",
    "gateway_token_cache",
    "get_gateway_client",
    "get_gateway_config",
]
