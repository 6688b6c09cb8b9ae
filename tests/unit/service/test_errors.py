# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import json
import logging
import pytest
from iothub_sdk.service.errors import (
    ErrorKind,
    IoTHubServiceError,
    classify,
    create_communication_error,
)

logging.basicConfig(level=logging.DEBUG)

FAKE_TRACKING_ID = "fake-tracking-id"


def nested_body(code, message="fake message", tracking_id=FAKE_TRACKING_ID):
    """Body in the shape IoTHub returns most often: JSON with a JSON document in 'Message'"""
    inner = {"errorCode": code, "trackingId": tracking_id, "message": message}
    return json.dumps({"Message": json.dumps(inner), "ExceptionMessage": "fake exception message"})


statuses = [400, 401, 403, 404, 409, 412, 413, 429, 500, 503]

well_formed_codes = {
    400: 400004,
    401: 401002,
    403: 403002,
    404: 404001,
    409: 409001,
    412: 412001,
    413: 413001,
    429: 429001,
    500: 500001,
    503: 503001,
}


@pytest.mark.describe("classify()")
class TestClassify:
    @pytest.mark.it(
        "Returns an IoTHubServiceError for every failure status, with or without a response body"
    )
    @pytest.mark.parametrize("status", statuses)
    @pytest.mark.parametrize("with_body", [pytest.param(True, id="Body"), pytest.param(False, id="No body")])
    def test_totality(self, status, with_body):
        body = nested_body(well_formed_codes[status]) if with_body else None
        error = classify(status, body)
        assert isinstance(error, IoTHubServiceError)
        assert isinstance(error.kind, ErrorKind)
        assert error.status_code == status
        assert isinstance(error.is_transient, bool)
        assert error.message
        if with_body:
            assert error.code == well_formed_codes[status]
        else:
            assert error.code == 0

    @pytest.mark.it("Never raises, regardless of how malformed the body is")
    @pytest.mark.parametrize(
        "body",
        [
            pytest.param("", id="Empty string"),
            pytest.param("   ", id="Whitespace"),
            pytest.param("{not json", id="Broken JSON"),
            pytest.param("[1, 2, 3]", id="JSON array"),
            pytest.param("null", id="JSON null"),
            pytest.param(b"\xff\xfe\xfd", id="Undecodable bytes"),
            pytest.param({"Message": 12}, id="Non-string message"),
            pytest.param({"errorCode": "abc"}, id="Unknown error name"),
            pytest.param({"errorCode": 99}, id="Out of range error code"),
            pytest.param({"errorCode": True}, id="Boolean error code"),
            pytest.param({"Message": "ErrorCode:;"}, id="Empty error code field"),
        ],
    )
    @pytest.mark.parametrize("status", [400, 404, 500, 418])
    def test_never_raises(self, status, body):
        error = classify(status, body)
        assert isinstance(error, IoTHubServiceError)

    @pytest.mark.it("Classifies IoTHub error codes into their kind and transience")
    @pytest.mark.parametrize(
        "status, code, expected_kind, expected_transient",
        [
            pytest.param(404, 404001, ErrorKind.DEVICE_NOT_FOUND, False, id="404001"),
            pytest.param(404, 404010, ErrorKind.MODULE_NOT_FOUND, False, id="404010"),
            pytest.param(409, 409001, ErrorKind.DEVICE_ALREADY_EXISTS, False, id="409001"),
            pytest.param(409, 409301, ErrorKind.MODULE_ALREADY_EXISTS, False, id="409301"),
            pytest.param(412, 412001, ErrorKind.PRECONDITION_FAILED, False, id="412001"),
            pytest.param(413, 413001, ErrorKind.MESSAGE_TOO_LARGE, False, id="413001"),
            pytest.param(429, 429001, ErrorKind.THROTTLED, True, id="429001"),
            pytest.param(400, 400013, ErrorKind.BULK_REGISTRY_OPERATION_FAILURE, False, id="400013"),
            pytest.param(401, 401002, ErrorKind.UNAUTHORIZED, False, id="401002"),
            pytest.param(403, 403002, ErrorKind.QUOTA_EXCEEDED, True, id="403002 (transient 403)"),
            pytest.param(500, 500001, ErrorKind.SERVER_ERROR, True, id="500001"),
            pytest.param(500, 500002, ErrorKind.JOB_CANCELLED, False, id="500002 (non-transient 500)"),
            pytest.param(503, 503001, ErrorKind.SERVER_BUSY, True, id="503001"),
        ],
    )
    def test_codes(self, status, code, expected_kind, expected_transient):
        error = classify(status, nested_body(code))
        assert error.kind is expected_kind
        assert error.is_transient is expected_transient
        assert error.code == code

    @pytest.mark.it("Falls back to the HTTP status when there is no error code")
    @pytest.mark.parametrize(
        "status, expected_kind, expected_transient",
        [
            pytest.param(400, ErrorKind.ARGUMENT_INVALID, False, id="400"),
            pytest.param(401, ErrorKind.UNAUTHORIZED, False, id="401"),
            pytest.param(403, ErrorKind.FORBIDDEN, False, id="403"),
            pytest.param(404, ErrorKind.NOT_FOUND, False, id="404"),
            pytest.param(409, ErrorKind.CONFLICT, False, id="409"),
            pytest.param(412, ErrorKind.PRECONDITION_FAILED, False, id="412"),
            pytest.param(429, ErrorKind.THROTTLED, True, id="429"),
            pytest.param(500, ErrorKind.SERVER_ERROR, True, id="500"),
            pytest.param(503, ErrorKind.SERVER_BUSY, True, id="503"),
            pytest.param(507, ErrorKind.SERVER_ERROR, True, id="Other 5xx"),
            pytest.param(418, ErrorKind.INVALID_ERROR_CODE, False, id="Unexpected 4xx"),
        ],
    )
    def test_status_fallback(self, status, expected_kind, expected_transient):
        error = classify(status)
        assert error.kind is expected_kind
        assert error.is_transient is expected_transient
        assert error.message == "IoTHub responded with status {}".format(status)

    @pytest.mark.it("Uses the provided not-found kind for a 404 without an error code")
    def test_not_found_kind(self):
        error = classify(404, not_found_kind=ErrorKind.CONFIGURATION_NOT_FOUND)
        assert error.kind is ErrorKind.CONFIGURATION_NOT_FOUND
        assert not error.is_transient

    @pytest.mark.it("Prefers the error code over the provided not-found kind")
    def test_not_found_kind_with_code(self):
        error = classify(404, nested_body(404010), not_found_kind=ErrorKind.DEVICE_NOT_FOUND)
        assert error.kind is ErrorKind.MODULE_NOT_FOUND

    @pytest.mark.it("Falls back to the HTTP status for an unknown code consistent with the status")
    def test_unknown_code(self):
        error = classify(404, nested_body(404999))
        assert error.kind is ErrorKind.NOT_FOUND
        assert error.code == 404999

    @pytest.mark.it("Classifies obsolete error codes as INVALID_ERROR_CODE, non-transient")
    @pytest.mark.parametrize(
        "status, code",
        [
            pytest.param(400, 400002, id="400002"),
            pytest.param(403, 403003, id="403003"),
            pytest.param(503, 503003, id="503003 PartitionNotFound"),
        ],
    )
    def test_obsolete(self, status, code):
        error = classify(status, nested_body(code))
        assert error.kind is ErrorKind.INVALID_ERROR_CODE
        assert not error.is_transient

    @pytest.mark.it(
        "Classifies an error code contradicting the HTTP status as INVALID_ERROR_CODE, non-transient"
    )
    def test_contradicting_code(self):
        error = classify(500, nested_body(404001))
        assert error.kind is ErrorKind.INVALID_ERROR_CODE
        assert not error.is_transient

    @pytest.mark.it("Parses the nested JSON 'Message' body shape")
    def test_nested_body(self):
        error = classify(404, nested_body(404001, "Device not found"))
        assert error.code == 404001
        assert error.message == "Device not found"
        assert error.tracking_id == FAKE_TRACKING_ID

    @pytest.mark.it("Parses the flat JSON body shape, with case-insensitive keys")
    @pytest.mark.parametrize(
        "body",
        [
            pytest.param(
                {"errorCode": 409001, "message": "exists", "trackingId": FAKE_TRACKING_ID},
                id="Decoded object",
            ),
            pytest.param(
                json.dumps({"ErrorCode": "409001", "Message": "exists", "TrackingId": FAKE_TRACKING_ID}),
                id="JSON text, capitalized keys",
            ),
        ],
    )
    def test_flat_body(self, body):
        error = classify(409, body)
        assert error.kind is ErrorKind.DEVICE_ALREADY_EXISTS
        assert error.message == "exists"
        assert error.tracking_id == FAKE_TRACKING_ID

    @pytest.mark.it("Parses the ';' delimited 'ErrorCode:<Name>' body shape")
    def test_delimited_body(self):
        body = json.dumps({"Message": "ErrorCode:DeviceNotFound;Device 'd1' was not found"})
        error = classify(404, body)
        assert error.kind is ErrorKind.DEVICE_NOT_FOUND
        assert error.code == 404001

    @pytest.mark.it("Parses a 6-digit code from a plain text body only if it matches the status")
    def test_plain_text(self):
        assert classify(429, "Throttled: 429001 too many requests").kind is ErrorKind.THROTTLED
        error = classify(429, "Request 123456 failed")
        assert error.kind is ErrorKind.THROTTLED
        assert error.code == 0

    @pytest.mark.it("Uses the error code and tracking id headers when the body has none")
    @pytest.mark.parametrize(
        "headers",
        [
            pytest.param({"iothub-errorcode": "DeviceNotFound"}, id="Lowercase headers"),
            pytest.param({"IotHub-ErrorCode": "404001"}, id="Mixed case headers"),
        ],
    )
    def test_headers(self, headers):
        headers = dict(headers)
        headers["iothub-trackingid"] = FAKE_TRACKING_ID
        error = classify(404, None, headers)
        assert error.kind is ErrorKind.DEVICE_NOT_FOUND
        assert error.tracking_id == FAKE_TRACKING_ID

    @pytest.mark.it(
        "Classifies as INVALID_ERROR_CODE, non-transient, if the body and header error codes disagree"
    )
    def test_header_mismatch(self):
        error = classify(404, nested_body(404001), {"iothub-errorcode": "404010"})
        assert error.kind is ErrorKind.INVALID_ERROR_CODE
        assert not error.is_transient
        assert error.code == 404001


@pytest.mark.describe("create_communication_error()")
class TestCreateCommunicationError:
    @pytest.mark.it("Returns a transient IOT_HUB_COMMUNICATION_ERROR caused by the given exception")
    def test_communication_error(self, arbitrary_exception):
        error = create_communication_error(arbitrary_exception)
        assert error.kind is ErrorKind.IOT_HUB_COMMUNICATION_ERROR
        assert error.is_transient
        assert error.status_code is None
        assert error.__cause__ is arbitrary_exception


@pytest.mark.describe("IoTHubServiceError")
class TestIoTHubServiceError:
    @pytest.mark.it("Exposes its details as read-only properties")
    def test_properties(self):
        error = IoTHubServiceError(
            ErrorKind.THROTTLED, "slow down", True, 429001, 429, FAKE_TRACKING_ID
        )
        assert error.kind is ErrorKind.THROTTLED
        assert error.message == "slow down"
        assert error.is_transient
        assert error.code == 429001
        assert error.status_code == 429
        assert error.tracking_id == FAKE_TRACKING_ID
        with pytest.raises(AttributeError):
            error.is_transient = False

    @pytest.mark.it("Includes the kind, code, message and tracking id in its string representation")
    def test_str(self):
        error = IoTHubServiceError(
            ErrorKind.THROTTLED, "slow down", True, 429001, 429, FAKE_TRACKING_ID
        )
        s = str(error)
        assert "ThrottlingException" in s
        assert "429001" in s
        assert "slow down" in s
        assert FAKE_TRACKING_ID in s
