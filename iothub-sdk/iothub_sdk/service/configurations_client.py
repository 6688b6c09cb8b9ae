# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
from typing import List, Optional, Union
from iothub_sdk import constant
from . import http_path
from . import models
from .errors import ErrorKind
from .http_client import (
    IoTHubServiceHTTPClient,
    GET,
    PUT,
    POST,
    DELETE,
    get_conditional_etag,
    validate_id,
)
from .models import (
    Configuration,
    ConfigurationContent,
    ConfigurationQueriesTestInput,
    ConfigurationQueriesTestResponse,
)

logger = logging.getLogger(__name__)

# Query parameter definitions
PARAM_TOP = "top"


class ConfigurationsClient:
    """Client for the automatic device and module configurations of an IoTHub.

    Not intended to be instantiated directly. Use the `.configurations` attribute of an
    IoTHubServiceClient instead.
    """

    def __init__(self, http_client: IoTHubServiceHTTPClient) -> None:
        self._http_client = http_client

    async def create(self, configuration: Configuration) -> Configuration:
        """Creates a configuration for devices or modules of an IoTHub.

        :param configuration: The configuration to create.
        :type configuration: :class:`Configuration`

        :raises: ValueError if the configuration has no id.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: Configuration object containing the created configuration.
        """
        _validate_configuration(configuration)
        logger.debug("Creating configuration {}".format(configuration.id))
        response = await self._http_client.request(
            PUT,
            http_path.get_configurations_path(configuration.id),
            expected_status=200,
            body=models.serialize(configuration, "Configuration"),
        )
        return models.deserialize("Configuration", response)

    async def get(self, configuration_id: str) -> Configuration:
        """Retrieves an IoTHub configuration.

        :param str configuration_id: The id of the configuration.

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The Configuration object.
        """
        validate_id(configuration_id, "configuration_id")
        response = await self._http_client.request(
            GET,
            http_path.get_configurations_path(configuration_id),
            expected_status=200,
            not_found_kind=ErrorKind.CONFIGURATION_NOT_FOUND,
        )
        return models.deserialize("Configuration", response)

    async def get_many(self, max_count: Optional[int] = None) -> List[Configuration]:
        """Retrieves multiple configurations of an IoTHub.

        :param int max_count: The maximum number of configurations to retrieve.

        :raises: ValueError if max_count is not a positive integer.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The list[Configuration] object.
        """
        query_params = None
        if max_count is not None:
            if isinstance(max_count, bool) or not isinstance(max_count, int) or max_count <= 0:
                raise ValueError("max_count must be a positive integer")
            query_params = {PARAM_TOP: str(max_count)}
        response = await self._http_client.request(
            GET,
            http_path.get_configurations_path(),
            expected_status=200,
            query_params=query_params,
        )
        return models.deserialize("[Configuration]", response)

    async def set(self, configuration: Configuration, force: bool = False) -> Configuration:
        """Replaces a configuration of an IoTHub.
           Note: that configuration Id and Content cannot be updated by the user.

        :param configuration: The configuration to replace. Its etag is used for optimistic
            concurrency.
        :type configuration: :class:`Configuration`
        :param bool force: If True, replace the configuration regardless of its current etag.

        :raises: ValueError if the configuration has no etag and force is False.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: Configuration object containing the updated configuration.
        """
        _validate_configuration(configuration)
        etag = get_conditional_etag(configuration.etag, force)
        logger.debug("Updating configuration {}".format(configuration.id))
        response = await self._http_client.request(
            PUT,
            http_path.get_configurations_path(configuration.id),
            expected_status=200,
            body=models.serialize(configuration, "Configuration"),
            etag=etag,
            not_found_kind=ErrorKind.CONFIGURATION_NOT_FOUND,
        )
        return models.deserialize("Configuration", response)

    async def delete(
        self, configuration: Union[str, Configuration], force: bool = False
    ) -> None:
        """Deletes a configuration from an IoTHub.

        When given a configuration id, the configuration is deleted regardless of its
        current etag.

        :param configuration: The id of the configuration, or the configuration to delete.
        :type configuration: str or :class:`Configuration`
        :param bool force: If True, delete the configuration regardless of its current etag.

        :raises: ValueError if given a configuration without etag and force is False.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 204.

        :returns: None.
        """
        if isinstance(configuration, str):
            configuration_id = configuration
            etag = constant.ETAG_WILDCARD
        else:
            _validate_configuration(configuration)
            configuration_id = configuration.id
            etag = get_conditional_etag(configuration.etag, force)
        validate_id(configuration_id, "configuration_id")
        logger.debug("Deleting configuration {}".format(configuration_id))
        await self._http_client.request(
            DELETE,
            http_path.get_configurations_path(configuration_id),
            expected_status=204,
            etag=etag,
            not_found_kind=ErrorKind.CONFIGURATION_NOT_FOUND,
        )

    async def test_queries(
        self, queries: ConfigurationQueriesTestInput
    ) -> ConfigurationQueriesTestResponse:
        """Validates the target condition query and custom metric queries for a configuration.

        :param queries: The queries to validate.
        :type queries: :class:`ConfigurationQueriesTestInput`

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The ConfigurationQueriesTestResponse object.
        """
        if queries is None:
            raise ValueError("queries cannot be None")
        response = await self._http_client.request(
            POST,
            http_path.get_configurations_test_queries_path(),
            expected_status=200,
            body=models.serialize(queries, "ConfigurationQueriesTestInput"),
        )
        return models.deserialize("ConfigurationQueriesTestResponse", response)

    async def apply_to_edge_device(self, device_id: str, content: ConfigurationContent) -> None:
        """Applies the provided configuration content to the specified edge device.
           Modules content is mandatory.

        :param str device_id: The name (Id) of the edge device.
        :param content: The configuration content to apply.
        :type content: :class:`ConfigurationContent`

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 204.

        :returns: None.
        """
        validate_id(device_id, "device_id")
        if content is None:
            raise ValueError("content cannot be None")
        logger.debug("Applying configuration content to edge device {}".format(device_id))
        await self._http_client.request(
            POST,
            http_path.get_apply_configuration_content_path(device_id),
            expected_status=204,
            body=models.serialize(content, "ConfigurationContent"),
            not_found_kind=ErrorKind.DEVICE_NOT_FOUND,
        )


def _validate_configuration(configuration: Configuration) -> None:
    if configuration is None:
        raise ValueError("configuration cannot be None")
    validate_id(configuration.id, "configuration.id")
