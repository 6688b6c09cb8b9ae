# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import json
import logging
import pytest
from iothub_sdk.service.devices_client import DevicesClient
from iothub_sdk.service.errors import ErrorKind, IoTHubServiceError, classify
from iothub_sdk.service.http_client import IoTHubServiceHTTPClient
from iothub_sdk.service.models import (
    BulkRegistryOperationResult,
    Device,
    Module,
    RegistryStatistics,
    ServiceStatistics,
)

logging.basicConfig(level=logging.DEBUG)

FAKE_DEVICE_ID = "fake_device"
FAKE_ETAG = "AAAAAAAAAAE="
FAKE_DEVICE_RESPONSE = {"deviceId": FAKE_DEVICE_ID, "etag": FAKE_ETAG, "status": "enabled"}
FAKE_BULK_RESPONSE = {"isSuccessful": True, "errors": [], "warnings": []}


# ~~~~~ Fixtures ~~~~~
@pytest.fixture
def mock_http_client(mocker):
    mock_http_client = mocker.MagicMock(spec=IoTHubServiceHTTPClient)
    mock_http_client.request = mocker.AsyncMock(return_value=FAKE_DEVICE_RESPONSE)
    return mock_http_client


@pytest.fixture
def client(mock_http_client):
    return DevicesClient(mock_http_client)


def make_devices(count, etag=FAKE_ETAG):
    return [Device(device_id="device{}".format(i), etag=etag) for i in range(count)]


def already_exists_error():
    inner = {"errorCode": 409001, "trackingId": "fake-tracking-id", "message": "exists"}
    return classify(409, json.dumps({"Message": json.dumps(inner)}))


# ~~~~~ Tests ~~~~~
@pytest.mark.describe("DevicesClient - .create()")
class TestCreate:
    @pytest.mark.it("Sends a PUT request for the device, expecting status 200")
    async def test_request(self, client, mock_http_client):
        await client.create(Device(device_id=FAKE_DEVICE_ID))

        assert mock_http_client.request.await_count == 1
        args, kwargs = mock_http_client.request.call_args
        assert args == ("PUT", "/devices/" + FAKE_DEVICE_ID)
        assert kwargs["expected_status"] == 200
        assert kwargs["body"]["deviceId"] == FAKE_DEVICE_ID
        assert kwargs["not_found_kind"] is ErrorKind.DEVICE_NOT_FOUND
        assert "etag" not in kwargs

    @pytest.mark.it("Returns the created Device")
    async def test_returns(self, client):
        device = await client.create(Device(device_id=FAKE_DEVICE_ID))
        assert isinstance(device, Device)
        assert device.device_id == FAKE_DEVICE_ID
        assert device.etag == FAKE_ETAG

    @pytest.mark.it(
        "Raises a non-transient DEVICE_ALREADY_EXISTS IoTHubServiceError if IoTHub responds with 409001"
    )
    async def test_already_exists(self, client, mock_http_client):
        mock_http_client.request.side_effect = already_exists_error()
        with pytest.raises(IoTHubServiceError) as e_info:
            await client.create(Device(device_id=FAKE_DEVICE_ID))
        assert e_info.value.kind is ErrorKind.DEVICE_ALREADY_EXISTS
        assert e_info.value.code == 409001
        assert not e_info.value.is_transient

    @pytest.mark.it("Raises ValueError without sending a request if the device has no device_id")
    @pytest.mark.parametrize(
        "device",
        [pytest.param(None, id="No device"), pytest.param(Device(), id="No device_id")],
    )
    async def test_invalid_device(self, client, mock_http_client, device):
        with pytest.raises(ValueError):
            await client.create(device)
        assert mock_http_client.request.await_count == 0

    @pytest.mark.it("Raises ValueError without sending a request if the device has an etag")
    async def test_etag(self, client, mock_http_client):
        with pytest.raises(ValueError):
            await client.create(Device(device_id=FAKE_DEVICE_ID, etag=FAKE_ETAG))
        assert mock_http_client.request.await_count == 0


@pytest.mark.describe("DevicesClient - .get()")
class TestGet:
    @pytest.mark.it("Sends a GET request for the device, with the device id URL encoded")
    async def test_request(self, client, mock_http_client):
        await client.get("fake device/1")

        args, kwargs = mock_http_client.request.call_args
        assert args == ("GET", "/devices/fake%20device%2F1")
        assert kwargs["expected_status"] == 200
        assert kwargs["not_found_kind"] is ErrorKind.DEVICE_NOT_FOUND

    @pytest.mark.it("Returns the requested Device")
    async def test_returns(self, client):
        device = await client.get(FAKE_DEVICE_ID)
        assert isinstance(device, Device)
        assert device.status == "enabled"

    @pytest.mark.it("Raises ValueError without sending a request if the device id is empty")
    async def test_empty_id(self, client, mock_http_client):
        with pytest.raises(ValueError):
            await client.get("")
        assert mock_http_client.request.await_count == 0

    @pytest.mark.it("Allows any IoTHubServiceError raised by the HTTP client to propagate")
    async def test_error(self, client, mock_http_client):
        error = classify(404)
        mock_http_client.request.side_effect = error
        with pytest.raises(IoTHubServiceError) as e_info:
            await client.get(FAKE_DEVICE_ID)
        assert e_info.value is error


@pytest.mark.describe("DevicesClient - .set()")
class TestSet:
    @pytest.mark.it("Sends a PUT request for the device, conditional on the etag of the device")
    async def test_etag(self, client, mock_http_client):
        await client.set(Device(device_id=FAKE_DEVICE_ID, etag=FAKE_ETAG))

        args, kwargs = mock_http_client.request.call_args
        assert args == ("PUT", "/devices/" + FAKE_DEVICE_ID)
        assert kwargs["etag"] == FAKE_ETAG
        assert kwargs["expected_status"] == 200

    @pytest.mark.it("Uses the '*' etag if force is True")
    @pytest.mark.parametrize(
        "etag", [pytest.param(FAKE_ETAG, id="With etag"), pytest.param(None, id="Without etag")]
    )
    async def test_force(self, client, mock_http_client, etag):
        await client.set(Device(device_id=FAKE_DEVICE_ID, etag=etag), force=True)
        assert mock_http_client.request.call_args[1]["etag"] == "*"

    @pytest.mark.it(
        "Raises ValueError without sending a request if the device has no etag and force is False"
    )
    async def test_no_etag(self, client, mock_http_client):
        with pytest.raises(ValueError):
            await client.set(Device(device_id=FAKE_DEVICE_ID))
        assert mock_http_client.request.await_count == 0


@pytest.mark.describe("DevicesClient - .delete()")
class TestDelete:
    @pytest.fixture(autouse=True)
    def empty_response(self, mock_http_client):
        mock_http_client.request.return_value = None

    @pytest.mark.it("Sends a DELETE request conditional on the etag of the device, expecting status 204")
    async def test_etag(self, client, mock_http_client):
        result = await client.delete(Device(device_id=FAKE_DEVICE_ID, etag=FAKE_ETAG))

        assert result is None
        args, kwargs = mock_http_client.request.call_args
        assert args == ("DELETE", "/devices/" + FAKE_DEVICE_ID)
        assert kwargs["etag"] == FAKE_ETAG
        assert kwargs["expected_status"] == 204

    @pytest.mark.it("Uses the '*' etag if force is True")
    async def test_force(self, client, mock_http_client):
        await client.delete(Device(device_id=FAKE_DEVICE_ID), force=True)
        assert mock_http_client.request.call_args[1]["etag"] == "*"

    @pytest.mark.it("Uses the '*' etag when given a device id")
    async def test_device_id(self, client, mock_http_client):
        await client.delete(FAKE_DEVICE_ID)
        args, kwargs = mock_http_client.request.call_args
        assert args == ("DELETE", "/devices/" + FAKE_DEVICE_ID)
        assert kwargs["etag"] == "*"

    @pytest.mark.it(
        "Raises ValueError without sending a request if the device has no etag and force is False"
    )
    async def test_no_etag(self, client, mock_http_client):
        with pytest.raises(ValueError):
            await client.delete(Device(device_id=FAKE_DEVICE_ID, etag=None))
        assert mock_http_client.request.await_count == 0

    @pytest.mark.it("Raises ValueError without sending a request if the device id is empty")
    async def test_empty_id(self, client, mock_http_client):
        with pytest.raises(ValueError):
            await client.delete("")
        assert mock_http_client.request.await_count == 0


@pytest.mark.describe("DevicesClient - .get_modules()")
class TestGetModules:
    @pytest.mark.it("Sends a GET request for the modules of the device and returns them")
    async def test_get_modules(self, client, mock_http_client):
        mock_http_client.request.return_value = [
            {"deviceId": FAKE_DEVICE_ID, "moduleId": "module1"},
            {"deviceId": FAKE_DEVICE_ID, "moduleId": "module2"},
        ]
        modules = await client.get_modules(FAKE_DEVICE_ID)

        args, kwargs = mock_http_client.request.call_args
        assert args == ("GET", "/devices/{}/modules".format(FAKE_DEVICE_ID))
        assert kwargs["expected_status"] == 200
        assert [m.module_id for m in modules] == ["module1", "module2"]
        assert all(isinstance(m, Module) for m in modules)


@pytest.mark.describe("DevicesClient - Bulk operations")
class TestBulkOperations:
    @pytest.fixture(autouse=True)
    def bulk_response(self, mock_http_client):
        mock_http_client.request.return_value = FAKE_BULK_RESPONSE

    @pytest.mark.it("Sends a single POST request to the device registry with the import mode for each device")
    @pytest.mark.parametrize(
        "method, force, expected_mode",
        [
            pytest.param("create_many", False, "create", id="create_many"),
            pytest.param("set_many", False, "updateIfMatchETag", id="set_many"),
            pytest.param("set_many", True, "update", id="set_many (force)"),
            pytest.param("delete_many", False, "deleteIfMatchETag", id="delete_many"),
            pytest.param("delete_many", True, "delete", id="delete_many (force)"),
        ],
    )
    async def test_import_mode(self, client, mock_http_client, method, force, expected_mode):
        devices = make_devices(3, etag=None if method == "create_many" else FAKE_ETAG)
        kwargs = {"force": True} if force else {}
        result = await getattr(client, method)(devices, **kwargs)

        assert mock_http_client.request.await_count == 1
        args, kwargs = mock_http_client.request.call_args
        assert args == ("POST", "/devices")
        assert kwargs["expected_status"] == 200
        body = kwargs["body"]
        assert [d["id"] for d in body] == ["device0", "device1", "device2"]
        assert all(d["importMode"] == expected_mode for d in body)
        assert isinstance(result, BulkRegistryOperationResult)
        assert result.is_successful is True

    @pytest.mark.it("Includes the etag of each device")
    async def test_etags(self, client, mock_http_client):
        await client.set_many(make_devices(2))
        body = mock_http_client.request.call_args[1]["body"]
        assert all(d["eTag"] == FAKE_ETAG for d in body)

    @pytest.mark.it("Accepts up to 100 devices")
    async def test_max(self, client, mock_http_client):
        await client.create_many(make_devices(100, etag=None))
        assert len(mock_http_client.request.call_args[1]["body"]) == 100

    @pytest.mark.it(
        "Raises ValueError without sending a request if the number of devices is not between 1 and 100"
    )
    @pytest.mark.parametrize("method", ["create_many", "set_many", "delete_many"])
    @pytest.mark.parametrize("count", [pytest.param(0, id="0"), pytest.param(101, id="101")])
    async def test_size(self, client, mock_http_client, method, count):
        with pytest.raises(ValueError):
            await getattr(client, method)(make_devices(count))
        assert mock_http_client.request.await_count == 0

    @pytest.mark.it(
        "Raises ValueError without sending a request if a device has no etag and force is False"
    )
    @pytest.mark.parametrize("method", ["set_many", "delete_many"])
    async def test_no_etag(self, client, mock_http_client, method):
        devices = make_devices(2)
        devices[1].etag = None
        with pytest.raises(ValueError):
            await getattr(client, method)(devices)
        assert mock_http_client.request.await_count == 0

    @pytest.mark.it("Does not require etags for create_many")
    async def test_create_no_etag(self, client, mock_http_client):
        await client.create_many(make_devices(2, etag=None))
        assert mock_http_client.request.await_count == 1

    @pytest.mark.it("Raises ValueError without sending a request if a device to create has an etag")
    async def test_create_with_etag(self, client, mock_http_client):
        devices = make_devices(2, etag=None)
        devices[1].etag = FAKE_ETAG
        with pytest.raises(ValueError):
            await client.create_many(devices)
        assert mock_http_client.request.await_count == 0

    @pytest.mark.it("Raises a BULK_REGISTRY_OPERATION_FAILURE IoTHubServiceError if IoTHub responds with 400013")
    async def test_bulk_failure(self, client, mock_http_client):
        mock_http_client.request.side_effect = classify(400, {"errorCode": 400013})
        with pytest.raises(IoTHubServiceError) as e_info:
            await client.create_many(make_devices(2, etag=None))
        assert e_info.value.kind is ErrorKind.BULK_REGISTRY_OPERATION_FAILURE


@pytest.mark.describe("DevicesClient - Statistics")
class TestStatistics:
    @pytest.mark.it("Sends a GET request for the registry statistics and returns them")
    async def test_registry_statistics(self, client, mock_http_client):
        mock_http_client.request.return_value = {
            "totalDeviceCount": 10,
            "enabledDeviceCount": 8,
            "disabledDeviceCount": 2,
        }
        stats = await client.get_registry_statistics()

        args, kwargs = mock_http_client.request.call_args
        assert args == ("GET", "/statistics/devices")
        assert kwargs["expected_status"] == 200
        assert isinstance(stats, RegistryStatistics)
        assert stats.total_device_count == 10
        assert stats.disabled_device_count == 2

    @pytest.mark.it("Sends a GET request for the service statistics and returns them")
    async def test_service_statistics(self, client, mock_http_client):
        mock_http_client.request.return_value = {"connectedDeviceCount": 4}
        stats = await client.get_service_statistics()

        args, kwargs = mock_http_client.request.call_args
        assert args == ("GET", "/statistics/service")
        assert isinstance(stats, ServiceStatistics)
        assert stats.connected_device_count == 4
