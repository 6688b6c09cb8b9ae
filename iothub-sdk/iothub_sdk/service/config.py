# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import ssl
from typing import Optional, Union
from iothub_sdk import constant

logger = logging.getLogger(__name__)

DEFAULT_SASTOKEN_TTL = 3600
DEFAULT_TIMEOUT = 10


class ServiceClientConfig:
    """
    Class for storing all configurations/options for the IoTHub service clients.
    """

    def __init__(
        self,
        *,
        hostname: str,
        shared_access_key_name: Optional[str] = None,
        shared_access_key: Optional[str] = None,
        sastoken: Optional[str] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
        sastoken_ttl: int = DEFAULT_SASTOKEN_TTL,
        timeout: Union[int, float] = DEFAULT_TIMEOUT,
        product_info: str = "",
        api_version: str = constant.IOTHUB_API_VERSION,
    ) -> None:
        """Initializer for ServiceClientConfig

        :param str hostname: The hostname of the IoTHub
        :param str shared_access_key_name: The name of the shared access policy
        :param str shared_access_key: The key of the shared access policy
        :param str sastoken: A SAS token string, used instead of a shared access key
        :param ssl_context: SSLContext to use with the client (default context if not provided)
        :type ssl_context: :class:`ssl.SSLContext`
        :param int sastoken_ttl: Time to live (in seconds) of generated SAS tokens
        :param timeout: Timeout (in seconds) for every HTTP request
        :param str product_info: A custom identification string appended to the User-Agent
        :param str api_version: The IoTHub service API version

        :raises: ValueError if an option is invalid
        :raises: TypeError if an option is of the wrong type
        """
        if not hostname:
            raise ValueError("hostname is required")
        if shared_access_key and sastoken:
            raise ValueError("Cannot use both a shared access key and a SAS token")
        if shared_access_key and not shared_access_key_name:
            raise ValueError("shared_access_key_name is required when using a shared access key")

        # Network
        self.hostname = hostname
        self.ssl_context = ssl_context
        self.timeout = _sanitize_timeout(timeout)

        # Auth
        self.shared_access_key_name = shared_access_key_name
        self.shared_access_key = shared_access_key
        self.sastoken = sastoken
        self.sastoken_ttl = _sanitize_sastoken_ttl(sastoken_ttl)

        # Requests
        self.product_info = product_info
        self.api_version = api_version


# Sanitization #


def _sanitize_timeout(timeout):
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise TypeError("Invalid type for 'timeout'. Must be a numeric value.")
    if timeout <= 0:
        raise ValueError("'timeout' must be greater than 0")
    return timeout


def _sanitize_sastoken_ttl(sastoken_ttl):
    try:
        sastoken_ttl = int(sastoken_ttl)
    except (ValueError, TypeError):
        raise TypeError("Invalid type for 'sastoken_ttl'. Must be a numeric value.")
    if sastoken_ttl <= 0:
        raise ValueError("'sastoken_ttl' must be greater than 0")
    return sastoken_ttl
