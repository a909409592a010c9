"""LLM client for API communication in visualcodex."""

from typing import Any, Optional

import requests

from ..constants import DEFAULT_ENDPOINT, DEFAULT_REQUEST_TIMEOUT, RESPONSE_PATH
from ..errors import AuthError, NetworkError, ProviderError
from ..utils.logging import logger
from .parsers import extract_response_content
from .payload import PayloadBuilder, create_payload_builder


class LLMClient:
    """Handles communication with a chat-completion API."""

    def __init__(self,
                 api_key: str,
                 payload_builder: PayloadBuilder,
                 endpoint: str = DEFAULT_ENDPOINT,
                 timeout: float = DEFAULT_REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        """Initialize LLM client.

        Args:
            api_key: Bearer token for the endpoint
            payload_builder: Builds the request body
            endpoint: Chat-completion URL
            timeout: Seconds to wait for a response
            session: HTTP session to reuse (a new one is created if None)
        """
        if not api_key:
            raise AuthError("API key not found. Please set it in the settings.")
        self.endpoint = endpoint
        self.timeout = timeout
        self.payload_builder = payload_builder
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def complete_chat(self, system_prompt: str, user_prompt: str, model: str) -> str:
        """Send one system+user exchange and return the reply text.

        Raises:
            NetworkError: The endpoint could not be reached
            AuthError: The endpoint rejected the credential
            ProviderError: The endpoint returned an error or an unusable body
        """
        payload = self.payload_builder.build_payload(system_prompt, user_prompt, model)
        logger.llm(f"Requesting completion from {model}")
        logger.debug(f"POST {self.endpoint} ({len(user_prompt)} prompt chars)")

        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise NetworkError(f"Request timed out after {self.timeout} seconds: {e}") from e
        except requests.RequestException as e:
            raise NetworkError(f"Request error: {e}") from e

        data = self._decode_body(response)
        error_message = extract_response_content(data, ".error.message")

        if response.status_code in (401, 403):
            raise AuthError(error_message or f"Authentication failed with HTTP {response.status_code}")
        if isinstance(data, dict) and "error" in data:
            raise ProviderError(error_message or "API error", status_code=response.status_code)
        if not response.ok:
            raise ProviderError(
                f"API request failed with HTTP {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        content = extract_response_content(data, RESPONSE_PATH)
        if not isinstance(content, str):
            raise ProviderError("Invalid response from API", status_code=response.status_code)

        logger.debug(f"Received {len(content)} chars from model")
        return content

    @staticmethod
    def _decode_body(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            if not response.ok:
                return None
            raise ProviderError(f"Failed to parse response: {e}", status_code=response.status_code) from e


def create_llm_client(config, api_key: str, session: Optional[requests.Session] = None) -> LLMClient:
    """Create an LLM client from a configuration snapshot.

    Args:
        config: ConfigSnapshot supplying endpoint and sampling settings
        api_key: Resolved credential for this turn
        session: Optional HTTP session to reuse
    """
    payload_builder = create_payload_builder(
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )
    return LLMClient(
        api_key,
        payload_builder,
        endpoint=config.endpoint,
        timeout=config.request_timeout,
        session=session,
    )
