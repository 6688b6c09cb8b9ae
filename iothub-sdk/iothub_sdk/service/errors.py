# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines the error raised for failed IoTHub service operations, and the
classification of failed responses into that error.

Every failure is represented by a single exception type, IoTHubServiceError, carrying an
ErrorKind. A failed response is classified exactly once, by classify().
"""

import enum
import json
import logging
import re
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from iothub_sdk.custom_typing import ParsedServiceError

logger = logging.getLogger(__name__)

ERROR_CODE_HEADER = "iothub-errorcode"
TRACKING_ID_HEADER = "iothub-trackingid"

NO_ERROR_CODE = 0

_ERROR_CODE_PATTERN = re.compile(r"\b(\d{6})\b")
_FIELD_DELIMITER = ";"
_FIELD_SEPARATOR = ":"


class ErrorKind(enum.Enum):
    """The kind of a failed IoTHub service operation.

    Values are the names IoTHub uses for these errors.
    """

    INVALID_PROTOCOL_VERSION = "InvalidProtocolVersion"
    INVALID_OPERATION = "InvalidOperation"
    ARGUMENT_INVALID = "ArgumentInvalid"
    ARGUMENT_NULL = "ArgumentNull"
    IOT_HUB_FORMAT_ERROR = "IotHubFormatError"
    DEVICE_DEFINED_MULTIPLE_TIMES = "DeviceDefinedMultipleTimes"
    BULK_REGISTRY_OPERATION_FAILURE = "BulkRegistryOperationFailure"
    IOT_HUB_SUSPENDED = "IotHubSuspended"
    IOT_HUB_NOT_FOUND = "IotHubNotFound"
    UNAUTHORIZED = "IotHubUnauthorizedAccess"
    FORBIDDEN = "Forbidden"
    QUOTA_EXCEEDED = "IotHubQuotaExceeded"
    DEVICE_MAXIMUM_QUEUE_DEPTH_EXCEEDED = "DeviceMaximumQueueDepthExceeded"
    NOT_FOUND = "NotFound"
    DEVICE_NOT_FOUND = "DeviceNotFound"
    JOB_NOT_FOUND = "JobNotFound"
    MODULE_NOT_FOUND = "ModuleNotFound"
    CONFIGURATION_NOT_FOUND = "ConfigurationNotFound"
    DEVICE_NOT_ONLINE = "DeviceNotOnline"
    TIMEOUT = "Timeout"
    CONFLICT = "Conflict"
    DEVICE_ALREADY_EXISTS = "DeviceAlreadyExists"
    MODULE_ALREADY_EXISTS = "ModuleAlreadyExistsOnDevice"
    PRECONDITION_FAILED = "PreconditionFailed"
    DEVICE_MESSAGE_LOCK_LOST = "DeviceMessageLockLost"
    MESSAGE_TOO_LARGE = "MessageTooLarge"
    TOO_MANY_DEVICES = "TooManyDevices"
    TOO_MANY_MODULES_ON_DEVICE = "TooManyModulesOnDevice"
    THROTTLED = "ThrottlingException"
    THROTTLE_BACKLOG_LIMIT_EXCEEDED = "ThrottleBacklogLimitExceeded"
    THROTTLING_BACKLOG_TIMEOUT = "ThrottlingBacklogTimeout"
    SERVER_ERROR = "ServerError"
    JOB_CANCELLED = "JobCancelled"
    SERVER_BUSY = "ServiceUnavailable"
    IOT_HUB_COMMUNICATION_ERROR = "IotHubCommunicationError"
    INVALID_ERROR_CODE = "InvalidErrorCode"


# code -> (kind, is_transient)
_ERROR_CODES: Dict[int, Tuple[ErrorKind, bool]] = {
    400001: (ErrorKind.INVALID_PROTOCOL_VERSION, False),
    400003: (ErrorKind.INVALID_OPERATION, False),
    400004: (ErrorKind.ARGUMENT_INVALID, False),
    400005: (ErrorKind.ARGUMENT_NULL, False),
    400006: (ErrorKind.IOT_HUB_FORMAT_ERROR, False),
    400011: (ErrorKind.DEVICE_DEFINED_MULTIPLE_TIMES, False),
    400013: (ErrorKind.BULK_REGISTRY_OPERATION_FAILURE, False),
    400020: (ErrorKind.IOT_HUB_SUSPENDED, False),
    401001: (ErrorKind.IOT_HUB_NOT_FOUND, False),
    401002: (ErrorKind.UNAUTHORIZED, False),
    403002: (ErrorKind.QUOTA_EXCEEDED, True),
    403004: (ErrorKind.DEVICE_MAXIMUM_QUEUE_DEPTH_EXCEEDED, False),
    404001: (ErrorKind.DEVICE_NOT_FOUND, False),
    404002: (ErrorKind.JOB_NOT_FOUND, False),
    404010: (ErrorKind.MODULE_NOT_FOUND, False),
    404103: (ErrorKind.DEVICE_NOT_ONLINE, False),
    409001: (ErrorKind.DEVICE_ALREADY_EXISTS, False),
    409301: (ErrorKind.MODULE_ALREADY_EXISTS, False),
    412001: (ErrorKind.PRECONDITION_FAILED, False),
    412002: (ErrorKind.DEVICE_MESSAGE_LOCK_LOST, False),
    413001: (ErrorKind.MESSAGE_TOO_LARGE, False),
    413002: (ErrorKind.TOO_MANY_DEVICES, False),
    413003: (ErrorKind.TOO_MANY_MODULES_ON_DEVICE, False),
    429001: (ErrorKind.THROTTLED, True),
    429002: (ErrorKind.THROTTLE_BACKLOG_LIMIT_EXCEEDED, True),
    429003: (ErrorKind.THROTTLING_BACKLOG_TIMEOUT, True),
    500001: (ErrorKind.SERVER_ERROR, True),
    500002: (ErrorKind.JOB_CANCELLED, False),
    503001: (ErrorKind.SERVER_BUSY, True),
}

# Codes IoTHub no longer returns. Receiving one means the response cannot be trusted.
_OBSOLETE_ERROR_CODES = frozenset(
    [
        400002,
        400007,
        400008,
        400009,
        400010,
        400012,
        400301,
        401003,
        403001,
        403003,
        403005,
        500009,
        503003,
    ]
)

# HTTP status -> (kind, is_transient), used when no usable error code is present
_STATUS_FALLBACKS: Dict[int, Tuple[ErrorKind, bool]] = {
    400: (ErrorKind.ARGUMENT_INVALID, False),
    401: (ErrorKind.UNAUTHORIZED, False),
    403: (ErrorKind.FORBIDDEN, False),
    404: (ErrorKind.NOT_FOUND, False),
    408: (ErrorKind.TIMEOUT, True),
    409: (ErrorKind.CONFLICT, False),
    412: (ErrorKind.PRECONDITION_FAILED, False),
    413: (ErrorKind.MESSAGE_TOO_LARGE, False),
    429: (ErrorKind.THROTTLED, True),
    500: (ErrorKind.SERVER_ERROR, True),
    502: (ErrorKind.SERVER_ERROR, True),
    503: (ErrorKind.SERVER_BUSY, True),
    504: (ErrorKind.TIMEOUT, True),
}

_CODES_BY_NAME: Dict[str, int] = {kind.value.lower(): code for code, (kind, _) in _ERROR_CODES.items()}


class IoTHubServiceError(Exception):
    """A failed IoTHub service operation.

    :ivar kind: The kind of failure
    :type kind: :class:`ErrorKind`
    :ivar int code: The 6-digit IoTHub error code, or 0 if none was available
    :ivar int status_code: The HTTP status of the failed response, if there was one
    :ivar str message: Description of the failure
    :ivar bool is_transient: True if retrying the operation may succeed
    :ivar str tracking_id: The IoTHub tracking id of the failed request, if provided
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        is_transient: bool,
        code: int = NO_ERROR_CODE,
        status_code: Optional[int] = None,
        tracking_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self._kind = kind
        self._code = code
        self._status_code = status_code
        self._message = message
        self._is_transient = is_transient
        self._tracking_id = tracking_id

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def code(self) -> int:
        return self._code

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    @property
    def message(self) -> str:
        return self._message

    @property
    def is_transient(self) -> bool:
        return self._is_transient

    @property
    def tracking_id(self) -> Optional[str]:
        return self._tracking_id

    def __str__(self) -> str:
        s = "{} ({}): {}".format(self._kind.value, self._code, self._message)
        if self._tracking_id:
            s += " [TrackingId: {}]".format(self._tracking_id)
        return s

    def __repr__(self) -> str:
        return "IoTHubServiceError(kind={}, code={}, status_code={}, is_transient={})".format(
            self._kind, self._code, self._status_code, self._is_transient
        )


def classify(
    status_code: int,
    body: Union[str, bytes, Mapping[str, Any], None] = None,
    headers: Optional[Mapping[str, str]] = None,
    not_found_kind: Optional[ErrorKind] = None,
) -> IoTHubServiceError:
    """Classify a failed IoTHub response.

    This function never raises.

    :param int status_code: The HTTP status of the response
    :param body: The response body (text, bytes, or already decoded JSON object)
    :param headers: The response headers
    :param not_found_kind: The kind to use for a 404 response without an error code
    :type not_found_kind: :class:`ErrorKind`
    :returns: The classified error
    :rtype: :class:`IoTHubServiceError`
    """
    parsed = _parse_body(body, status_code)
    header_code = _parse_header_code(headers)
    tracking_id = parsed["tracking_id"] or _get_header(headers, TRACKING_ID_HEADER)
    message = parsed["message"] or "IoTHub responded with status {}".format(status_code)

    body_code = parsed["code"]
    if body_code is not None and header_code is not None and body_code != header_code:
        logger.warning(
            "Mismatch between response body error code ({}) and header error code ({})".format(
                body_code, header_code
            )
        )
        return IoTHubServiceError(
            kind=ErrorKind.INVALID_ERROR_CODE,
            message=message,
            is_transient=False,
            code=body_code,
            status_code=status_code,
            tracking_id=tracking_id,
        )

    code = body_code if body_code is not None else header_code
    kind, is_transient = _lookup(status_code, code, not_found_kind)
    return IoTHubServiceError(
        kind=kind,
        message=message,
        is_transient=is_transient,
        code=code if code is not None else NO_ERROR_CODE,
        status_code=status_code,
        tracking_id=tracking_id,
    )


def create_communication_error(cause: BaseException) -> IoTHubServiceError:
    """Create the error representing a failure to communicate with IoTHub at all"""
    error = IoTHubServiceError(
        kind=ErrorKind.IOT_HUB_COMMUNICATION_ERROR,
        message="Unable to communicate with IoTHub: {}".format(str(cause) or type(cause).__name__),
        is_transient=True,
    )
    error.__cause__ = cause
    return error


def _lookup(
    status_code: int, code: Optional[int], not_found_kind: Optional[ErrorKind]
) -> Tuple[ErrorKind, bool]:
    if code is not None:
        if code in _OBSOLETE_ERROR_CODES:
            logger.warning("Received obsolete error code {}".format(code))
            return (ErrorKind.INVALID_ERROR_CODE, False)
        if code // 1000 != status_code:
            logger.warning(
                "Error code {} does not match HTTP status {}".format(code, status_code)
            )
            return (ErrorKind.INVALID_ERROR_CODE, False)
        if code in _ERROR_CODES:
            return _ERROR_CODES[code]
        logger.warning("Unknown error code {}, classifying by HTTP status".format(code))

    if status_code == 404 and not_found_kind is not None:
        return (not_found_kind, False)
    if status_code in _STATUS_FALLBACKS:
        return _STATUS_FALLBACKS[status_code]
    if 500 <= status_code <= 599:
        return (ErrorKind.SERVER_ERROR, True)
    return (ErrorKind.INVALID_ERROR_CODE, False)


def _get_header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    if not headers:
        return None
    value = headers.get(name)
    if value is None:
        # Plain dictionaries are not case-insensitive like aiohttp's CIMultiDictProxy
        for key in headers:
            if isinstance(key, str) and key.lower() == name:
                value = headers[key]
                break
    return value


def _parse_header_code(headers: Optional[Mapping[str, str]]) -> Optional[int]:
    value = _get_header(headers, ERROR_CODE_HEADER)
    if value is None:
        return None
    return _to_code(value)


def _to_code(value: Any) -> Optional[int]:
    """Convert an error code field (number, numeric string, or error name) to a 6-digit code"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 100000 <= value <= 599999 else None
    if not isinstance(value, str):
        return None
    value = value.strip()
    if value[:6].isdigit():
        return _to_code(int(value[:6]))
    return _CODES_BY_NAME.get(value.lower())


def _empty_result(message: str = "") -> ParsedServiceError:
    return {"code": None, "message": message, "tracking_id": None}


def _parse_body(body: Any, status_code: int) -> ParsedServiceError:
    if body is None:
        return _empty_result()
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        text = body.strip()
        if not text:
            return _empty_result()
        try:
            obj = json.loads(text)
        except ValueError:
            return _parse_text(text, status_code)
    else:
        obj = body

    if isinstance(obj, Mapping):
        return _parse_mapping(obj, status_code)
    if isinstance(obj, str):
        return _parse_text(obj, status_code)
    return _empty_result(str(obj))


def _get_field(obj: Mapping[str, Any], name: str) -> Any:
    for key in obj:
        if isinstance(key, str) and key.lower() == name.lower():
            return obj[key]
    return None


def _parse_mapping(obj: Mapping[str, Any], status_code: int) -> ParsedServiceError:
    error_code = _get_field(obj, "errorCode")
    message = _get_field(obj, "message")
    tracking_id = _get_field(obj, "trackingId")

    if error_code is not None:
        return {
            "code": _to_code(error_code),
            "message": str(message) if message is not None else "",
            "tracking_id": str(tracking_id) if tracking_id is not None else None,
        }

    if isinstance(message, str):
        # The message field frequently holds a nested JSON document, or a ';' delimited string
        try:
            inner = json.loads(message)
        except ValueError:
            inner = None
        if isinstance(inner, Mapping):
            result = _parse_mapping(inner, status_code)
        else:
            result = _parse_text(message, status_code)
        if tracking_id is not None and result["tracking_id"] is None:
            result["tracking_id"] = str(tracking_id)
        return result

    result = _empty_result(json.dumps(obj, default=str))
    if tracking_id is not None:
        result["tracking_id"] = str(tracking_id)
    return result


def _parse_text(text: str, status_code: int) -> ParsedServiceError:
    result = _empty_result(text)
    for field in text.split(_FIELD_DELIMITER):
        if _FIELD_SEPARATOR not in field:
            continue
        name, value = (part.strip() for part in field.split(_FIELD_SEPARATOR, 1))
        if name.lower() == "errorcode" and result["code"] is None:
            result["code"] = _to_code(value)
        elif name.lower() == "trackingid" and result["tracking_id"] is None:
            result["tracking_id"] = value

    if result["code"] is None:
        # Only trust a bare number if it is consistent with the response status
        for match in _ERROR_CODE_PATTERN.finditer(text):
            candidate = int(match.group(1))
            if candidate // 1000 == status_code:
                result["code"] = candidate
                break
    return result
