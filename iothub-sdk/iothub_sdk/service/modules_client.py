# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
from typing import Optional, Union
from iothub_sdk import constant
from . import http_path
from . import models
from .errors import ErrorKind
from .http_client import (
    IoTHubServiceHTTPClient,
    GET,
    PUT,
    DELETE,
    get_conditional_etag,
    validate_id,
    validate_no_etag,
)
from .models import Module

logger = logging.getLogger(__name__)


class ModulesClient:
    """Client for the module identities of the IoTHub registry.

    Not intended to be instantiated directly. Use the `.modules` attribute of an
    IoTHubServiceClient instead.
    """

    def __init__(self, http_client: IoTHubServiceHTTPClient) -> None:
        self._http_client = http_client

    async def create(self, module: Module) -> Module:
        """Creates a module identity for a device on IoTHub.

        :param module: The module to create.
        :type module: :class:`Module`

        :raises: ValueError if the module has no device_id or module_id, or if it has an etag.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: Module object containing the created module.
        """
        _validate_module(module)
        validate_no_etag(module.etag, "{}/{}".format(module.device_id, module.module_id))
        logger.debug("Creating module {}/{}".format(module.device_id, module.module_id))
        response = await self._http_client.request(
            PUT,
            http_path.get_modules_path(module.device_id, module.module_id),
            expected_status=200,
            body=models.serialize(module, "Module"),
            not_found_kind=ErrorKind.DEVICE_NOT_FOUND,
        )
        return models.deserialize("Module", response)

    async def get(self, device_id: str, module_id: str) -> Module:
        """Retrieves a module identity for a device from IoTHub.

        :param str device_id: The name (Id) of the device.
        :param str module_id: The name (Id) of the module.

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The Module object containing the requested module.
        """
        validate_id(device_id, "device_id")
        validate_id(module_id, "module_id")
        response = await self._http_client.request(
            GET,
            http_path.get_modules_path(device_id, module_id),
            expected_status=200,
            not_found_kind=ErrorKind.MODULE_NOT_FOUND,
        )
        return models.deserialize("Module", response)

    async def set(self, module: Module, force: bool = False) -> Module:
        """Replaces a module identity on IoTHub.

        :param module: The module to replace. Its etag is used for optimistic concurrency.
        :type module: :class:`Module`
        :param bool force: If True, replace the module regardless of its current etag.

        :raises: ValueError if the module has no etag and force is False.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The Module object containing the updated module.
        """
        _validate_module(module)
        etag = get_conditional_etag(module.etag, force)
        logger.debug("Updating module {}/{}".format(module.device_id, module.module_id))
        response = await self._http_client.request(
            PUT,
            http_path.get_modules_path(module.device_id, module.module_id),
            expected_status=200,
            body=models.serialize(module, "Module"),
            etag=etag,
            not_found_kind=ErrorKind.MODULE_NOT_FOUND,
        )
        return models.deserialize("Module", response)

    async def delete(
        self,
        module: Union[str, Module],
        module_id: Optional[str] = None,
        force: bool = False,
    ) -> None:
        """Deletes a module identity from IoTHub.

        Can be called with a Module, or with a device id and a module id. When given ids,
        the module is deleted regardless of its current etag.

        :param module: The name (Id) of the device, or the module to delete.
        :type module: str or :class:`Module`
        :param str module_id: The name (Id) of the module, when module is a device id.
        :param bool force: If True, delete the module regardless of its current etag.

        :raises: ValueError if given a module without etag and force is False.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 204.

        :returns: None.
        """
        if isinstance(module, str):
            device_id = module
            etag = constant.ETAG_WILDCARD
        else:
            _validate_module(module)
            device_id = module.device_id
            module_id = module.module_id
            etag = get_conditional_etag(module.etag, force)
        validate_id(device_id, "device_id")
        validate_id(module_id, "module_id")  # type: ignore
        logger.debug("Deleting module {}/{}".format(device_id, module_id))
        await self._http_client.request(
            DELETE,
            http_path.get_modules_path(device_id, module_id),
            expected_status=204,
            etag=etag,
            not_found_kind=ErrorKind.MODULE_NOT_FOUND,
        )


def _validate_module(module: Module) -> None:
    if module is None:
        raise ValueError("module cannot be None")
    validate_id(module.device_id, "module.device_id")
    validate_id(module.module_id, "module.module_id")
