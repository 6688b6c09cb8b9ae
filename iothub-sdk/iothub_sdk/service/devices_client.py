# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
from typing import List, Union
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
    validate_no_etag,
)
from .models import (
    BulkRegistryOperationResult,
    Device,
    ExportImportDevice,
    ImportMode,
    Module,
    RegistryStatistics,
    ServiceStatistics,
)

logger = logging.getLogger(__name__)


class DevicesClient:
    """Client for the device identities of the IoTHub registry.

    Not intended to be instantiated directly. Use the `.devices` attribute of an
    IoTHubServiceClient instead.
    """

    def __init__(self, http_client: IoTHubServiceHTTPClient) -> None:
        self._http_client = http_client

    async def create(self, device: Device) -> Device:
        """Creates a device identity on IoTHub.

        :param device: The device to create.
        :type device: :class:`Device`

        :raises: ValueError if the device has no device_id, or if it has an etag.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The Device object containing the created device.
        """
        _validate_device(device)
        validate_no_etag(device.etag, device.device_id)
        logger.debug("Creating device {}".format(device.device_id))
        response = await self._http_client.request(
            PUT,
            http_path.get_devices_path(device.device_id),
            expected_status=200,
            body=models.serialize(device, "Device"),
            not_found_kind=ErrorKind.DEVICE_NOT_FOUND,
        )
        return models.deserialize("Device", response)

    async def get(self, device_id: str) -> Device:
        """Retrieves a device identity from IoTHub.

        :param str device_id: The name (Id) of the device.

        :raises: ValueError if the device_id is empty.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The Device object containing the requested device.
        """
        validate_id(device_id, "device_id")
        response = await self._http_client.request(
            GET,
            http_path.get_devices_path(device_id),
            expected_status=200,
            not_found_kind=ErrorKind.DEVICE_NOT_FOUND,
        )
        return models.deserialize("Device", response)

    async def set(self, device: Device, force: bool = False) -> Device:
        """Replaces a device identity on IoTHub.

        :param device: The device to replace. Its etag is used for optimistic concurrency.
        :type device: :class:`Device`
        :param bool force: If True, replace the device regardless of its current etag.

        :raises: ValueError if the device has no device_id, or if it has no etag and
            force is False.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The Device object containing the updated device.
        """
        _validate_device(device)
        etag = get_conditional_etag(device.etag, force)
        logger.debug("Updating device {}".format(device.device_id))
        response = await self._http_client.request(
            PUT,
            http_path.get_devices_path(device.device_id),
            expected_status=200,
            body=models.serialize(device, "Device"),
            etag=etag,
            not_found_kind=ErrorKind.DEVICE_NOT_FOUND,
        )
        return models.deserialize("Device", response)

    async def delete(self, device: Union[str, Device], force: bool = False) -> None:
        """Deletes a device identity from IoTHub.

        When given a device id, the device is deleted regardless of its current etag.

        :param device: The name (Id) of the device, or the device to delete.
        :type device: str or :class:`Device`
        :param bool force: If True, delete the device regardless of its current etag.

        :raises: ValueError if given a device without etag and force is False.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 204.

        :returns: None.
        """
        if isinstance(device, str):
            device_id = device
            etag = constant.ETAG_WILDCARD
        else:
            _validate_device(device)
            device_id = device.device_id
            etag = get_conditional_etag(device.etag, force)
        validate_id(device_id, "device_id")
        logger.debug("Deleting device {}".format(device_id))
        await self._http_client.request(
            DELETE,
            http_path.get_devices_path(device_id),
            expected_status=204,
            etag=etag,
            not_found_kind=ErrorKind.DEVICE_NOT_FOUND,
        )

    async def get_modules(self, device_id: str) -> List[Module]:
        """Retrieves all module identities on a device.

        :param str device_id: The name (Id) of the device.

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The list[Module] containing all the modules on the device.
        """
        validate_id(device_id, "device_id")
        response = await self._http_client.request(
            GET,
            http_path.get_modules_path(device_id),
            expected_status=200,
            not_found_kind=ErrorKind.DEVICE_NOT_FOUND,
        )
        return models.deserialize("[Module]", response)

    async def create_many(self, devices: List[Device]) -> BulkRegistryOperationResult:
        """Creates up to 100 device identities in a single request.

        :param list[Device] devices: The devices to create.

        :raises: ValueError if the number of devices is not between 1 and 100, or if a device
            has an etag.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The BulkRegistryOperationResult object.
        """
        return await self._bulk_operation(devices, ImportMode.create, check_etag=False)

    async def set_many(
        self, devices: List[Device], force: bool = False
    ) -> BulkRegistryOperationResult:
        """Replaces up to 100 device identities in a single request.

        :param list[Device] devices: The devices to replace.
        :param bool force: If True, replace the devices regardless of their current etags.

        :raises: ValueError if the number of devices is not between 1 and 100, or if a device
            has no etag and force is False.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The BulkRegistryOperationResult object.
        """
        mode = ImportMode.update if force else ImportMode.update_if_match_etag
        return await self._bulk_operation(devices, mode, check_etag=not force)

    async def delete_many(
        self, devices: List[Device], force: bool = False
    ) -> BulkRegistryOperationResult:
        """Deletes up to 100 device identities in a single request.

        :param list[Device] devices: The devices to delete.
        :param bool force: If True, delete the devices regardless of their current etags.

        :raises: ValueError if the number of devices is not between 1 and 100, or if a device
            has no etag and force is False.
        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The BulkRegistryOperationResult object.
        """
        mode = ImportMode.delete if force else ImportMode.delete_if_match_etag
        return await self._bulk_operation(devices, mode, check_etag=not force)

    async def get_registry_statistics(self) -> RegistryStatistics:
        """Retrieves the IoTHub device registry statistics.

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The RegistryStatistics object.
        """
        response = await self._http_client.request(
            GET, http_path.get_device_statistics_path(), expected_status=200
        )
        return models.deserialize("RegistryStatistics", response)

    async def get_service_statistics(self) -> ServiceStatistics:
        """Retrieves the IoTHub service statistics.

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The ServiceStatistics object.
        """
        response = await self._http_client.request(
            GET, http_path.get_service_statistics_path(), expected_status=200
        )
        return models.deserialize("ServiceStatistics", response)

    async def _bulk_operation(
        self, devices: List[Device], mode: ImportMode, check_etag: bool
    ) -> BulkRegistryOperationResult:
        if not devices or len(devices) > constant.MAX_BULK_OPERATION_SIZE:
            raise ValueError(
                "Bulk operations require between 1 and {} devices".format(
                    constant.MAX_BULK_OPERATION_SIZE
                )
            )
        for device in devices:
            _validate_device(device)
            if check_etag and not device.etag:
                raise ValueError(
                    "Device {} has no etag. Set force=True to ignore etags".format(device.device_id)
                )
            if mode is ImportMode.create:
                validate_no_etag(device.etag, device.device_id)
        export_import_devices = [_to_export_import_device(device, mode) for device in devices]

        logger.debug("Sending bulk '{}' request for {} devices".format(mode.value, len(devices)))
        response = await self._http_client.request(
            POST,
            http_path.get_devices_path(),
            expected_status=200,
            body=models.serialize(export_import_devices, "[ExportImportDevice]"),
        )
        return models.deserialize("BulkRegistryOperationResult", response)


def _to_export_import_device(device: Device, mode: ImportMode) -> ExportImportDevice:
    return ExportImportDevice(
        id=device.device_id,
        e_tag=device.etag,
        import_mode=mode,
        status=device.status,
        status_reason=device.status_reason,
        authentication=device.authentication,
        capabilities=device.capabilities,
        device_scope=device.device_scope,
        parent_scopes=device.parent_scopes,
    )


def _validate_device(device: Device) -> None:
    if device is None:
        raise ValueError("device cannot be None")
    validate_id(device.device_id, "device.device_id")
