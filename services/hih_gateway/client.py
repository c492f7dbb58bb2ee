"""
CMS HIH Gateway client.
Handles OAuth2 client-credentials authentication and submission creation.
"""

import time
import httpx
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.settings import (
    APP_ENV,
    CMS_HIH_BASE_URL,
    CMS_HIH_TOKEN_URL,
    CMS_HIH_CLIENT_ID,
    CMS_HIH_CLIENT_SECRET,
    CMS_HIH_SCOPE,
    CMS_HIH_MESSAGE,
    CMS_HIH_SIGNATURE,
    CMS_HIH_TIMEOUT_SECONDS,
    CMS_HIH_MOCK_FALLBACK,
)
from services.hih_gateway.token_cache import TokenCache
from utils.logger import get_logger

logger = get_logger(__name__)


SUBMISSION_PATH = "/app-portal/rest/riocapi/submission"

# Tokens handed out when the gateway cannot issue a real one
MOCK_TOKEN_PREFIX = "mock_"
MOCK_TOKEN_UNCONFIGURED = "mock_token"
MOCK_TOKEN_DEV = "mock_token_dev"
MOCK_TOKEN_PENDING_CONFIG = "mock_token_pending_config"


class HIHGatewayError(Exception):
    """Raised when the gateway cannot be used and mock fallback is disabled."""


@dataclass(frozen=True)
class HIHGatewayConfig:
    base_url: str
    token_url: str
    client_id: str
    client_secret: str
    scope: str = "clientCreds"
    message: str = ""
    signature: str = ""
    timeout_seconds: float = 30.0
    environment: str = "development"
    mock_fallback: bool = True

    @property
    def submission_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{SUBMISSION_PATH}"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret and self.token_url)


def get_gateway_config() -> HIHGatewayConfig:
    return HIHGatewayConfig(
        base_url=CMS_HIH_BASE_URL,
        token_url=CMS_HIH_TOKEN_URL,
        client_id=CMS_HIH_CLIENT_ID,
        client_secret=CMS_HIH_CLIENT_SECRET,
        scope=CMS_HIH_SCOPE,
        message=CMS_HIH_MESSAGE,
        signature=CMS_HIH_SIGNATURE,
        timeout_seconds=CMS_HIH_TIMEOUT_SECONDS,
        environment=APP_ENV,
        mock_fallback=CMS_HIH_MOCK_FALLBACK,
    )


@dataclass
class HIHSubmissionResult:
    status: str  # "success" or "error"
    message: str
    submission_id: Optional[str] = None
    errors: List[Dict[str, str]] = field(default_factory=list)
    is_mock: bool = False

    @property
    def ok(self) -> bool:
        return self.status == "success"


class HIHGatewayClient:
    """
    CMS HIH Gateway client for OAuth and submission operations.
    """

    def __init__(
        self,
        config: Optional[HIHGatewayConfig] = None,
        token_cache: Optional[TokenCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: Gateway settings; read from the environment when omitted.
            token_cache: Cache shared between clients; a private one when omitted.
            transport: Optional httpx transport (used to stub the gateway).
        """
        self.config = config or get_gateway_config()
        self.token_cache = token_cache or TokenCache()
        self.transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport, timeout=self.config.timeout_seconds)

    # =========================================================================
    # OAuth Methods
    # =========================================================================

    async def get_access_token(self) -> str:
        """
        Get an access token using the client credentials flow.

        Returns the cached token while it is fresh. When credentials are
        missing or the token request fails, a mock token is returned instead
        (unless mock fallback is disabled, in which case HIHGatewayError is
        raised).
        """
        cached = self.token_cache.get(self.config.client_id)
        if cached:
            return cached

        if not self.config.is_configured():
            if not self.config.mock_fallback:
                raise HIHGatewayError("CMS HIH Gateway credentials not configured")
            logger.warning("[HIHGateway] Credentials not configured, using mock token")
            return MOCK_TOKEN_UNCONFIGURED

        data = {
            "grant_type": "client_credentials",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "scope": self.config.scope,
        }
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

        try:
            logger.info("[HIHGateway] Requesting new access token")
            async with self._http_client() as client:
                response = await client.post(self.config.token_url, headers=headers, data=data)

            if response.status_code != 200:
                logger.error(
                    f"[HIHGateway] Token request failed: {response.status_code} - {response.text}"
                )
                raise HIHGatewayError(f"OAuth token request failed: {response.status_code}")

            token_data = response.json()
            access_token = token_data["access_token"]
        except (httpx.HTTPError, HIHGatewayError, KeyError, ValueError) as e:
            if not self.config.mock_fallback:
                raise HIHGatewayError(f"Could not obtain access token: {e}") from e
            if self.config.is_development:
                logger.warning("[HIHGateway] Falling back to mock token for development")
                return MOCK_TOKEN_DEV
            logger.warning("[HIHGateway] Using mock mode, gateway client may need configuration")
            return MOCK_TOKEN_PENDING_CONFIG

        self.token_cache.set(
            self.config.client_id,
            access_token,
            int(token_data.get("expires_in", 0)),
        )
        logger.info("[HIHGateway] Successfully obtained access token")
        return access_token

    # =========================================================================
    # Submission Methods
    # =========================================================================

    def _get_submission_headers(self, access_token: str) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {access_token}",
        }
        if self.config.message and self.config.signature:
            headers["Message"] = self.config.message
            headers["Signature"] = self.config.signature
        return headers

    @staticmethod
    def _mock_result(prefix: str, message: str) -> HIHSubmissionResult:
        return HIHSubmissionResult(
            status="success",
            message=message,
            submission_id=f"{prefix}{int(time.time() * 1000)}",
            is_mock=True,
        )

    async def create_submission(self, payload: Dict[str, Any]) -> HIHSubmissionResult:
        """
        Create a submission in the CMS HIH Gateway.

        Args:
            payload: Body built by build_submission_payload()

        Returns:
            HIHSubmissionResult; gateway and network failures are reported
            as error results rather than raised.
        """
        access_token = await self.get_access_token()

        if access_token.startswith(MOCK_TOKEN_PREFIX):
            logger.warning("[HIHGateway] Using mock response for submission creation")
            return self._mock_result(
                "mock_",
                "Mock submission created successfully (OAuth credentials may need configuration)",
            )

        try:
            async with self._http_client() as client:
                response = await client.post(
                    self.config.submission_url,
                    headers=self._get_submission_headers(access_token),
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"[HIHGateway] Error calling gateway: {e}")
            if self.config.is_development and self.config.mock_fallback:
                logger.warning("[HIHGateway] Providing mock response due to API error in development")
                return self._mock_result("mock_dev_", "Mock submission created (API error in development)")
            return HIHSubmissionResult(
                status="error",
                message=f"Failed to create submission: {e}",
                errors=[{"code": "NETWORK_ERROR", "description": "Failed to connect to CMS HIH Gateway"}],
            )

        try:
            response_data = response.json()
        except ValueError:
            response_data = {}

        if response.status_code == 401:
            # Token revoked or expired early; the next call fetches a new one
            self.token_cache.invalidate(self.config.client_id)

        if not response.is_success:
            logger.error(f"[HIHGateway] API error: {response.status_code} - {response_data}")
            errors = response_data.get("errors") if isinstance(response_data, dict) else None
            return HIHSubmissionResult(
                status="error",
                message=f"CMS HIH Gateway API error: {response.reason_phrase}",
                errors=errors if isinstance(errors, list) else [
                    {"code": "HTTP_ERROR", "description": response.reason_phrase}
                ],
            )

        submission_id = None
        if isinstance(response_data, dict):
            submission_id = response_data.get("submissionId") or response_data.get("id")

        logger.info(f"[HIHGateway] Submission created successfully: {submission_id}")
        return HIHSubmissionResult(
            status="success",
            message="Submission created successfully",
            submission_id=submission_id,
        )
