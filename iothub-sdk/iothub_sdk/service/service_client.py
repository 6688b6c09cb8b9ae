# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import ssl
from types import TracebackType
from typing import Optional, Type
from iothub_sdk import connection_string as cs
from . import config
from .configurations_client import ConfigurationsClient
from .devices_client import DevicesClient
from .http_client import IoTHubServiceHTTPClient
from .jobs_client import JobsClient
from .modules_client import ModulesClient

logger = logging.getLogger(__name__)


class IoTHubServiceClient:
    """Client for the registry operations of an IoTHub.

    All sub-clients share a single HTTP client (and connection pool). Shut the client
    down when finished, or use it as an async context manager.
    """

    def __init__(
        self,
        *,
        hostname: str,
        shared_access_key_name: Optional[str] = None,
        shared_access_key: Optional[str] = None,
        sastoken: Optional[str] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
        sastoken_ttl: int = 3600,
        **kwargs,
    ) -> None:
        """
        :param str hostname: Hostname of the IoTHub
        :param str shared_access_key_name: The name of the shared access policy
        :param str shared_access_key: The key of the shared access policy, used to generate
            SAS Tokens
        :param str sastoken: A SAS Token string to use directly as a credential
        :param ssl_context: Custom SSL context to be used for HTTPS.
            If not provided, a default one will be used
        :type ssl_context: :class:`ssl.SSLContext`
        :param sastoken_ttl: Time-to-live (in seconds) for SAS tokens generated when using
            'shared_access_key' authentication.
            Default is 3600 seconds (1 hour).

        :keyword float timeout: Timeout (in seconds) for every HTTP request. Default is 10 seconds
        :keyword str product_info: Arbitrary product information which will be included in the
            User-Agent string
        :keyword str api_version: The IoTHub service API version to use

        :raises: ValueError if an invalid combination of parameters are provided
        :raises: ValueError if an invalid parameter value is provided
        :raises: TypeError if an unsupported keyword argument is provided
        """
        _validate_kwargs(**kwargs)
        if not shared_access_key and not sastoken:
            raise ValueError(
                "Missing authentication - must provide one of 'shared_access_key' or 'sastoken'"
            )
        if not ssl_context:
            ssl_context = _default_ssl_context()

        client_config = config.ServiceClientConfig(
            hostname=hostname,
            shared_access_key_name=shared_access_key_name,
            shared_access_key=shared_access_key,
            sastoken=sastoken,
            ssl_context=ssl_context,
            sastoken_ttl=sastoken_ttl,
            **kwargs,
        )
        self._http_client = IoTHubServiceHTTPClient(client_config)
        self.devices = DevicesClient(self._http_client)
        self.modules = ModulesClient(self._http_client)
        self.configurations = ConfigurationsClient(self._http_client)
        self.jobs = JobsClient(self._http_client)

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str,
        ssl_context: Optional[ssl.SSLContext] = None,
        sastoken_ttl: int = 3600,
        **kwargs,
    ) -> "IoTHubServiceClient":
        """Instantiate an IoTHubServiceClient using an IoTHub shared access policy
        connection string

        :returns: A new instance of IoTHubServiceClient
        :rtype: IoTHubServiceClient

        :param str connection_string: The IoTHub connection string
        :param ssl_context: Custom SSL context to be used for HTTPS.
            If not provided, a default one will be used
        :type ssl_context: :class:`ssl.SSLContext`
        :param sastoken_ttl: Time-to-live (in seconds) for SAS tokens used for authentication.
            Default is 3600 seconds (1 hour).

        :keyword float timeout: Timeout (in seconds) for every HTTP request. Default is 10 seconds
        :keyword str product_info: Arbitrary product information which will be included in the
            User-Agent string

        :raises: ValueError if the provided connection string is invalid
        :raises: TypeError if an unsupported keyword argument is provided
        """
        connection_string = cs.ConnectionString(connection_string)
        if not connection_string.is_service_connection_string:
            raise ValueError("Connection string is not an IoTHub shared access policy connection string")
        return cls(
            hostname=connection_string[cs.HOST_NAME],
            shared_access_key_name=connection_string.get(cs.SHARED_ACCESS_KEY_NAME),
            shared_access_key=connection_string.get(cs.SHARED_ACCESS_KEY),
            sastoken=connection_string.get(cs.SHARED_ACCESS_SIGNATURE),
            ssl_context=ssl_context,
            sastoken_ttl=sastoken_ttl,
            **kwargs,
        )

    async def shutdown(self) -> None:
        """Shut down the client, and close all of its connections"""
        await self._http_client.shutdown()

    async def __aenter__(self) -> "IoTHubServiceClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.shutdown()


def _validate_kwargs(exclude=[], **kwargs) -> None:
    """Helper function to validate user provided kwargs.
    Raises TypeError if an invalid option has been provided"""
    valid_kwargs = [
        "timeout",
        "product_info",
        "api_version",
    ]

    for kwarg in kwargs:
        if (kwarg not in valid_kwargs) or (kwarg in exclude):
            # NOTE: TypeError is the conventional error that is returned when an invalid kwarg is
            # supplied. It feels like it should be a ValueError, but it's not.
            raise TypeError("Unsupported keyword argument: '{}'".format(kwarg))


def _default_ssl_context() -> ssl.SSLContext:
    """Return a default SSLContext"""
    ssl_context = ssl.SSLContext(protocol=ssl.PROTOCOL_TLS_CLIENT)
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    ssl_context.check_hostname = True
    ssl_context.load_default_certs()
    return ssl_context
