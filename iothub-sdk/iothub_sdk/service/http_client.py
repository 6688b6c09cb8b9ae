# --------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import aiohttp
import asyncio
import json
import logging
import urllib.parse
from typing import Any, Dict, Optional
from iothub_sdk import constant, product_info
from iothub_sdk import sastoken as st
from iothub_sdk.exceptions import ResponseFormatError
from iothub_sdk.signing_mechanism import SymmetricKeySigningMechanism
from . import config
from .errors import ErrorKind, classify, create_communication_error

logger = logging.getLogger(__name__)

# Header Definitions
HEADER_AUTHORIZATION = "Authorization"
HEADER_USER_AGENT = "User-Agent"
HEADER_IF_MATCH = "If-Match"
HEADER_CONTENT_TYPE = "Content-Type"

# Query parameter definitions
PARAM_API_VERSION = "api-version"

# HTTP methods
GET = "GET"
PUT = "PUT"
POST = "POST"
DELETE = "DELETE"


class IoTHubServiceHTTPClient:
    """HTTP client shared by all of the IoTHub registry clients.

    Every request is validated against exactly one expected status. Any other status is
    classified and raised as an IoTHubServiceError.
    """

    def __init__(self, client_config: config.ServiceClientConfig) -> None:
        """Instantiate the client

        :param client_config: The config object for the client
        :type client_config: :class:`ServiceClientConfig`
        """
        self._hostname = client_config.hostname
        self._api_version = client_config.api_version
        self._user_agent_string = product_info.get_iothub_user_agent() + client_config.product_info
        self._ssl_context = client_config.ssl_context
        self._sastoken_provider = _create_sastoken_provider(client_config)
        self._session = _create_client_session(client_config.hostname, client_config.timeout)

    async def shutdown(self) -> None:
        """Shut down the client

        Invoke only when complete finished with the client for graceful exit.
        """
        await self._session.close()
        # Wait 250ms for the underlying SSL connections to close
        # See: https://docs.aiohttp.org/en/stable/client_advanced.html#graceful-shutdown
        await asyncio.sleep(0.25)

    async def request(
        self,
        method: str,
        path: str,
        *,
        expected_status: int,
        body: Any = None,
        etag: Optional[str] = None,
        query_params: Optional[Dict[str, str]] = None,
        not_found_kind: Optional[ErrorKind] = None,
    ) -> Any:
        """Send a request to IoTHub and return the decoded JSON response body

        :param str method: The HTTP method
        :param str path: The request path
        :param int expected_status: The only status that indicates success
        :param body: JSON serializable request body
        :param str etag: ETag to send in the If-Match header
        :param dict query_params: Additional query parameters
        :param not_found_kind: The error kind to use for a 404 without an error code

        :returns: The decoded JSON response body, or None if there is no body

        :raises: :class:`IoTHubServiceError` if IoTHub responds with an unexpected status,
            or if IoTHub cannot be reached
        :raises: :class:`ResponseFormatError` if a successful response cannot be decoded
        """
        params = {PARAM_API_VERSION: self._api_version}
        if query_params:
            params.update(query_params)
        # NOTE: Other headers are auto-generated by aiohttp
        headers = {HEADER_USER_AGENT: urllib.parse.quote_plus(self._user_agent_string)}
        if etag is not None:
            headers[HEADER_IF_MATCH] = _ensure_quoted(etag)
        if self._sastoken_provider:
            sastoken = await self._sastoken_provider.get_current_sastoken()
            headers[HEADER_AUTHORIZATION] = str(sastoken)

        logger.debug("Sending {method} request to {path}".format(method=method, path=path))
        try:
            async with self._session.request(
                method,
                url=path,
                json=body,
                params=params,
                headers=headers,
                ssl=self._ssl_context,
            ) as response:
                response_text = await response.text()
                if response.status != expected_status:
                    error = classify(
                        response.status,
                        response_text,
                        response.headers,
                        not_found_kind=not_found_kind,
                    )
                    logger.error(
                        "Received failure response from IoTHub for {method} {path}: {error}".format(
                            method=method, path=path, error=error
                        )
                    )
                    raise error
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(
                "Unable to communicate with IoTHub for {method} {path}".format(
                    method=method, path=path
                ),
                exc_info=True,
            )
            raise create_communication_error(e) from e

        logger.debug(
            "Successfully received response from IoTHub for {method} {path}".format(
                method=method, path=path
            )
        )
        if not response_text:
            return None
        try:
            return json.loads(response_text)
        except ValueError as e:
            raise ResponseFormatError("Unable to decode response from IoTHub") from e


def validate_id(value: str, name: str) -> None:
    """Raise ValueError if an identifier is not a non-empty string"""
    if not value or not isinstance(value, str):
        raise ValueError("{} must be a non-empty string".format(name))


def validate_no_etag(etag: Optional[str], identity: str) -> None:
    """Raise ValueError if an identity being created already carries an etag"""
    if etag:
        raise ValueError("ETag must not be set when creating {}".format(identity))


def get_conditional_etag(etag: Optional[str], force: bool) -> str:
    """Return the etag to send with a conditional (If-Match) request

    :raises: ValueError if there is no etag and force is False
    """
    if force:
        return constant.ETAG_WILDCARD
    if not etag:
        raise ValueError("An etag is required unless force is True")
    return etag


def _ensure_quoted(etag: str) -> str:
    if etag == constant.ETAG_WILDCARD or (len(etag) > 1 and etag[0] == '"' and etag[-1] == '"'):
        return etag
    return '"' + etag + '"'


def _create_sastoken_provider(
    client_config: config.ServiceClientConfig,
) -> Optional[st.SasTokenProvider]:
    if client_config.sastoken:
        return _StaticSasTokenProvider(st.SasToken(client_config.sastoken))
    if client_config.shared_access_key:
        generator = st.SasTokenGenerator(
            signing_mechanism=SymmetricKeySigningMechanism(
                client_config.shared_access_key, key_name=client_config.shared_access_key_name
            ),
            uri=client_config.hostname,
            ttl=client_config.sastoken_ttl,
        )
        return st.SasTokenProvider(generator)
    return None


class _StaticSasTokenProvider(st.SasTokenProvider):
    """Provides a user-supplied SasToken that is never renewed"""

    def __init__(self, sastoken: st.SasToken) -> None:
        self._sastoken = sastoken

    async def get_current_sastoken(self) -> st.SasToken:
        return self._sastoken


def _create_client_session(hostname: str, timeout_secs: float) -> aiohttp.ClientSession:
    """Create and return a aiohttp ClientSession object"""
    base_url = "https://{hostname}".format(hostname=hostname)
    timeout = aiohttp.ClientTimeout(total=timeout_secs)
    session = aiohttp.ClientSession(base_url=base_url, timeout=timeout)
    logger.debug(
        "Creating HTTP Session for {url} with timeout of {timeout}".format(
            url=base_url, timeout=timeout.total
        )
    )
    return session
