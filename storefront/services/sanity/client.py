# storefront.services.sanity.client

import json
import logging
import httpx
from typing import Any, Dict, Optional

from storefront.core.exceptions import ContentStoreError

logger = logging.getLogger(__name__)


class SanityClient:
    """
    Asynchronous read-only client for the Sanity HTTP query API.

    Each call runs one GROQ query:
        GET https://{project}.api[cdn].sanity.io/v{version}/data/query/{dataset}?query=...&$param=<json>

    Query parameters are JSON-encoded and prefixed with ``$`` as the API
    expects. The ``result`` member of the response body is returned.

    Documentation: https://www.sanity.io/docs/http-query
    """

    def __init__(
        self,
        project_id: str,
        dataset: str = "production",
        api_version: str = "2024-01-01",
        token: Optional[str] = None,
        use_cdn: bool = True,
        timeout: float = 10.0,
    ):
        """
        Initialize the Sanity client

        Args:
            project_id: Sanity project id
            dataset: Dataset name
            api_version: Dated API version (without the leading ``v``)
            token: Optional read token; authenticated requests bypass the CDN
            use_cdn: Whether to query the cached API CDN
            timeout: Request timeout in seconds
        """
        self.project_id = project_id
        self.dataset = dataset
        self.api_version = api_version.lstrip("v")
        self.token = token
        self.use_cdn = use_cdn and not token
        self.timeout = timeout
        host = "apicdn" if self.use_cdn else "api"
        self.BASE_URL = f"https://{project_id}.{host}.sanity.io/v{self.api_version}"
        logger.info(f"Initializing SanityClient for project {project_id} ({dataset}, {'cdn' if self.use_cdn else 'live'})")

    @classmethod
    def from_settings(cls, settings) -> "SanityClient":
        return cls(
            project_id=settings.SANITY_PROJECT_ID,
            dataset=settings.SANITY_DATASET,
            api_version=settings.SANITY_API_VERSION,
            token=settings.SANITY_API_TOKEN,
            use_cdn=settings.SANITY_USE_CDN,
        )

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @staticmethod
    def _encode_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return {f"${key}": json.dumps(value) for key, value in (params or {}).items()}

    async def fetch(self, query: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run a GROQ query and return its ``result``

        Raises:
            ContentStoreError: on network errors, non-2xx responses or a body without ``result``
        """
        url = f"{self.BASE_URL}/data/query/{self.dataset}"
        request_params = {"query": query, **self._encode_params(params)}

        logger.debug(f"Querying {url} with params {list((params or {}).keys())}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method="GET",
                    url=url,
                    headers=self._get_headers(),
                    params=request_params,
                )
        except httpx.TimeoutException as e:
            logger.error(f"Timeout error: {str(e)}")
            raise ContentStoreError(f"Request timed out: {str(e)}")
        except httpx.RequestError as e:
            logger.error(f"Network error: {str(e)}")
            raise ContentStoreError(f"Network error: {str(e)}")

        if response.status_code != 200:
            logger.error(f"Sanity API error {response.status_code}: {response.text}")
            raise ContentStoreError(f"Request failed ({response.status_code}): {response.text}")

        try:
            body = response.json()
        except ValueError as e:
            raise ContentStoreError(f"Invalid JSON response: {str(e)}")

        if not isinstance(body, dict) or "result" not in body:
            raise ContentStoreError("Response body has no result")

        return body["result"]
