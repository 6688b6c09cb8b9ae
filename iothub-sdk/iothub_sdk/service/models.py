# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the models exchanged with the IoTHub registry, along with the
helpers used to convert them to and from their JSON representation.
"""

import logging
from enum import Enum
from typing import Any
from msrest.exceptions import DeserializationError, SerializationError
from msrest.serialization import Model, Serializer, Deserializer
from iothub_sdk.exceptions import ResponseFormatError

logger = logging.getLogger(__name__)


class ImportMode(str, Enum):
    """The operation to perform on a device (or module) in a bulk registry request"""

    create = "create"
    update = "update"
    update_if_match_etag = "updateIfMatchETag"
    delete = "delete"
    delete_if_match_etag = "deleteIfMatchETag"
    update_twin = "updateTwin"
    update_twin_if_match_etag = "updateTwinIfMatchETag"


class SymmetricKey(Model):
    """Represents a symmetric key pair.

    :param primary_key: Base64 encoded primary key.
    :type primary_key: str
    :param secondary_key: Base64 encoded secondary key.
    :type secondary_key: str
    """

    _attribute_map = {
        "primary_key": {"key": "primaryKey", "type": "str"},
        "secondary_key": {"key": "secondaryKey", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(SymmetricKey, self).__init__(**kwargs)
        self.primary_key = kwargs.get("primary_key", None)
        self.secondary_key = kwargs.get("secondary_key", None)


class X509Thumbprint(Model):
    """Represents a pair of X509 certificate thumbprints.

    :param primary_thumbprint: The X509 client certificate primary thumbprint.
    :type primary_thumbprint: str
    :param secondary_thumbprint: The X509 client certificate secondary thumbprint.
    :type secondary_thumbprint: str
    """

    _attribute_map = {
        "primary_thumbprint": {"key": "primaryThumbprint", "type": "str"},
        "secondary_thumbprint": {"key": "secondaryThumbprint", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(X509Thumbprint, self).__init__(**kwargs)
        self.primary_thumbprint = kwargs.get("primary_thumbprint", None)
        self.secondary_thumbprint = kwargs.get("secondary_thumbprint", None)


class AuthenticationMechanism(Model):
    """The authentication used by a device or module.

    :param symmetric_key: The primary and secondary keys used for SAS based authentication.
    :type symmetric_key: SymmetricKey
    :param x509_thumbprint: The primary and secondary x509 thumbprints used for x509 based
        authentication.
    :type x509_thumbprint: X509Thumbprint
    :param type: The type of authentication. Possible values include: 'sas', 'selfSigned',
        'certificateAuthority', 'none'
    :type type: str
    """

    _attribute_map = {
        "symmetric_key": {"key": "symmetricKey", "type": "SymmetricKey"},
        "x509_thumbprint": {"key": "x509Thumbprint", "type": "X509Thumbprint"},
        "type": {"key": "type", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(AuthenticationMechanism, self).__init__(**kwargs)
        self.symmetric_key = kwargs.get("symmetric_key", None)
        self.x509_thumbprint = kwargs.get("x509_thumbprint", None)
        self.type = kwargs.get("type", None)


class DeviceCapabilities(Model):
    """The status of capabilities enabled on the device.

    :param iot_edge: The property that determines if the device is an edge device or not.
    :type iot_edge: bool
    """

    _attribute_map = {"iot_edge": {"key": "iotEdge", "type": "bool"}}

    def __init__(self, **kwargs):
        super(DeviceCapabilities, self).__init__(**kwargs)
        self.iot_edge = kwargs.get("iot_edge", None)


class Device(Model):
    """A device identity in the IoTHub registry.

    :param device_id: The unique identifier of the device.
    :type device_id: str
    :param generation_id: The IoT Hub generated, case-sensitive string used to distinguish
        devices with the same device_id that have been deleted and re-created.
    :type generation_id: str
    :param etag: The string representing a weak ETag for the device identity.
    :type etag: str
    :param connection_state: Possible values include: 'Disconnected', 'Connected'
    :type connection_state: str
    :param status: Possible values include: 'enabled', 'disabled'
    :type status: str
    :param status_reason: The 128 character-long string that stores the reason for the device
        identity status.
    :type status_reason: str
    :param connection_state_updated_time: The date and time the connection state was last updated.
    :type connection_state_updated_time: datetime
    :param status_updated_time: The date and time when the status field was last updated.
    :type status_updated_time: datetime
    :param last_activity_time: The date and last time the device last connected, received, or
        sent a message.
    :type last_activity_time: datetime
    :param cloud_to_device_message_count: The number of cloud-to-device messages currently
        queued to be sent to the device.
    :type cloud_to_device_message_count: int
    :param authentication: The authentication mechanism used by the device.
    :type authentication: AuthenticationMechanism
    :param capabilities: The set of capabilities of the device.
    :type capabilities: DeviceCapabilities
    :param device_scope: The scope of the device.
    :type device_scope: str
    :param parent_scopes: The scopes of the upper level edge devices if applicable.
    :type parent_scopes: list[str]
    """

    _attribute_map = {
        "device_id": {"key": "deviceId", "type": "str"},
        "generation_id": {"key": "generationId", "type": "str"},
        "etag": {"key": "etag", "type": "str"},
        "connection_state": {"key": "connectionState", "type": "str"},
        "status": {"key": "status", "type": "str"},
        "status_reason": {"key": "statusReason", "type": "str"},
        "connection_state_updated_time": {
            "key": "connectionStateUpdatedTime",
            "type": "iso-8601",
        },
        "status_updated_time": {"key": "statusUpdatedTime", "type": "iso-8601"},
        "last_activity_time": {"key": "lastActivityTime", "type": "iso-8601"},
        "cloud_to_device_message_count": {"key": "cloudToDeviceMessageCount", "type": "int"},
        "authentication": {"key": "authentication", "type": "AuthenticationMechanism"},
        "capabilities": {"key": "capabilities", "type": "DeviceCapabilities"},
        "device_scope": {"key": "deviceScope", "type": "str"},
        "parent_scopes": {"key": "parentScopes", "type": "[str]"},
    }

    def __init__(self, **kwargs):
        super(Device, self).__init__(**kwargs)
        self.device_id = kwargs.get("device_id", None)
        self.generation_id = kwargs.get("generation_id", None)
        self.etag = kwargs.get("etag", None)
        self.connection_state = kwargs.get("connection_state", None)
        self.status = kwargs.get("status", None)
        self.status_reason = kwargs.get("status_reason", None)
        self.connection_state_updated_time = kwargs.get("connection_state_updated_time", None)
        self.status_updated_time = kwargs.get("status_updated_time", None)
        self.last_activity_time = kwargs.get("last_activity_time", None)
        self.cloud_to_device_message_count = kwargs.get("cloud_to_device_message_count", None)
        self.authentication = kwargs.get("authentication", None)
        self.capabilities = kwargs.get("capabilities", None)
        self.device_scope = kwargs.get("device_scope", None)
        self.parent_scopes = kwargs.get("parent_scopes", None)


class Module(Model):
    """A module identity on a device in the IoTHub registry.

    :param module_id: The unique identifier of the module.
    :type module_id: str
    :param managed_by: Identifies who manages this module. For instance, this value is
        'IotEdge' if the edge runtime owns this module.
    :type managed_by: str
    :param device_id: The unique identifier of the device.
    :type device_id: str
    :param generation_id: The IoT Hub generated, case-sensitive string.
    :type generation_id: str
    :param etag: The string representing a weak ETag for the module identity.
    :type etag: str
    :param connection_state: Possible values include: 'Disconnected', 'Connected'
    :type connection_state: str
    :param connection_state_updated_time: The date and time the connection state was last updated.
    :type connection_state_updated_time: datetime
    :param last_activity_time: The date and time the module last connected, received, or sent
        a message.
    :type last_activity_time: datetime
    :param cloud_to_device_message_count: The number of cloud-to-module messages currently
        queued to be sent to the module.
    :type cloud_to_device_message_count: int
    :param authentication: The authentication mechanism used by the module.
    :type authentication: AuthenticationMechanism
    """

    _attribute_map = {
        "module_id": {"key": "moduleId", "type": "str"},
        "managed_by": {"key": "managedBy", "type": "str"},
        "device_id": {"key": "deviceId", "type": "str"},
        "generation_id": {"key": "generationId", "type": "str"},
        "etag": {"key": "etag", "type": "str"},
        "connection_state": {"key": "connectionState", "type": "str"},
        "connection_state_updated_time": {
            "key": "connectionStateUpdatedTime",
            "type": "iso-8601",
        },
        "last_activity_time": {"key": "lastActivityTime", "type": "iso-8601"},
        "cloud_to_device_message_count": {"key": "cloudToDeviceMessageCount", "type": "int"},
        "authentication": {"key": "authentication", "type": "AuthenticationMechanism"},
    }

    def __init__(self, **kwargs):
        super(Module, self).__init__(**kwargs)
        self.module_id = kwargs.get("module_id", None)
        self.managed_by = kwargs.get("managed_by", None)
        self.device_id = kwargs.get("device_id", None)
        self.generation_id = kwargs.get("generation_id", None)
        self.etag = kwargs.get("etag", None)
        self.connection_state = kwargs.get("connection_state", None)
        self.connection_state_updated_time = kwargs.get("connection_state_updated_time", None)
        self.last_activity_time = kwargs.get("last_activity_time", None)
        self.cloud_to_device_message_count = kwargs.get("cloud_to_device_message_count", None)
        self.authentication = kwargs.get("authentication", None)


class ConfigurationContent(Model):
    """The configuration content for devices or modules on edge devices.

    :param device_content: The device configuration content.
    :type device_content: dict[str, object]
    :param modules_content: The modules configuration content.
    :type modules_content: dict[str, dict[str, object]]
    :param module_content: The module configuration content.
    :type module_content: dict[str, object]
    """

    _attribute_map = {
        "device_content": {"key": "deviceContent", "type": "{object}"},
        "modules_content": {"key": "modulesContent", "type": "{{object}}"},
        "module_content": {"key": "moduleContent", "type": "{object}"},
    }

    def __init__(self, **kwargs):
        super(ConfigurationContent, self).__init__(**kwargs)
        self.device_content = kwargs.get("device_content", None)
        self.modules_content = kwargs.get("modules_content", None)
        self.module_content = kwargs.get("module_content", None)


class ConfigurationMetrics(Model):
    """The metrics for a configuration.

    :param results: The results of the metrics collection queries.
    :type results: dict[str, long]
    :param queries: The key-value pairs with queries and their identifier.
    :type queries: dict[str, str]
    """

    _attribute_map = {
        "results": {"key": "results", "type": "{long}"},
        "queries": {"key": "queries", "type": "{str}"},
    }

    def __init__(self, **kwargs):
        super(ConfigurationMetrics, self).__init__(**kwargs)
        self.results = kwargs.get("results", None)
        self.queries = kwargs.get("queries", None)


class Configuration(Model):
    """The configuration for IoT hub device and module twins.

    :param id: The unique identifier of the configuration.
    :type id: str
    :param schema_version: The schema version of the configuration.
    :type schema_version: str
    :param labels: The key-value pairs used to describe the configuration.
    :type labels: dict[str, str]
    :param content: The content of the configuration.
    :type content: ConfigurationContent
    :param target_condition: The query used to define the targeted devices or modules.
    :type target_condition: str
    :param created_time_utc: The creation date and time of the configuration.
    :type created_time_utc: datetime
    :param last_updated_time_utc: The update date and time of the configuration.
    :type last_updated_time_utc: datetime
    :param priority: The priority number assigned to the configuration.
    :type priority: int
    :param system_metrics: The system metrics computed by the IoT Hub.
    :type system_metrics: ConfigurationMetrics
    :param metrics: The custom metrics specified by the developer.
    :type metrics: ConfigurationMetrics
    :param etag: The ETag of the configuration.
    :type etag: str
    """

    _attribute_map = {
        "id": {"key": "id", "type": "str"},
        "schema_version": {"key": "schemaVersion", "type": "str"},
        "labels": {"key": "labels", "type": "{str}"},
        "content": {"key": "content", "type": "ConfigurationContent"},
        "target_condition": {"key": "targetCondition", "type": "str"},
        "created_time_utc": {"key": "createdTimeUtc", "type": "iso-8601"},
        "last_updated_time_utc": {"key": "lastUpdatedTimeUtc", "type": "iso-8601"},
        "priority": {"key": "priority", "type": "int"},
        "system_metrics": {"key": "systemMetrics", "type": "ConfigurationMetrics"},
        "metrics": {"key": "metrics", "type": "ConfigurationMetrics"},
        "etag": {"key": "etag", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(Configuration, self).__init__(**kwargs)
        self.id = kwargs.get("id", None)
        self.schema_version = kwargs.get("schema_version", None)
        self.labels = kwargs.get("labels", None)
        self.content = kwargs.get("content", None)
        self.target_condition = kwargs.get("target_condition", None)
        self.created_time_utc = kwargs.get("created_time_utc", None)
        self.last_updated_time_utc = kwargs.get("last_updated_time_utc", None)
        self.priority = kwargs.get("priority", None)
        self.system_metrics = kwargs.get("system_metrics", None)
        self.metrics = kwargs.get("metrics", None)
        self.etag = kwargs.get("etag", None)


class ConfigurationQueriesTestInput(Model):
    """The queries to validate for a configuration.

    :param target_condition: The query used to define targeted devices or modules.
    :type target_condition: str
    :param custom_metric_queries: The key-value pairs with queries and their identifier.
    :type custom_metric_queries: dict[str, str]
    """

    _attribute_map = {
        "target_condition": {"key": "targetCondition", "type": "str"},
        "custom_metric_queries": {"key": "customMetricQueries", "type": "{str}"},
    }

    def __init__(self, **kwargs):
        super(ConfigurationQueriesTestInput, self).__init__(**kwargs)
        self.target_condition = kwargs.get("target_condition", None)
        self.custom_metric_queries = kwargs.get("custom_metric_queries", None)


class ConfigurationQueriesTestResponse(Model):
    """The result of validating the queries of a configuration.

    :param target_condition_error: The errors from running the target condition query.
    :type target_condition_error: str
    :param custom_metric_query_errors: The errors from running the custom metric query.
    :type custom_metric_query_errors: dict[str, str]
    """

    _attribute_map = {
        "target_condition_error": {"key": "targetConditionError", "type": "str"},
        "custom_metric_query_errors": {"key": "customMetricQueryErrors", "type": "{str}"},
    }

    def __init__(self, **kwargs):
        super(ConfigurationQueriesTestResponse, self).__init__(**kwargs)
        self.target_condition_error = kwargs.get("target_condition_error", None)
        self.custom_metric_query_errors = kwargs.get("custom_metric_query_errors", None)


class ExportImportDevice(Model):
    """A device (or module) identity, and the operation to perform on it in a bulk request.

    :param id: The unique identifier of the device.
    :type id: str
    :param module_id: The unique identifier of the module, if applicable.
    :type module_id: str
    :param e_tag: The string representing a weak ETag for the device RFC7232.
    :type e_tag: str
    :param import_mode: The type of registry operation and ETag preferences.
    :type import_mode: str or ImportMode
    :param status: The status of the module. Possible values include: 'enabled', 'disabled'
    :type status: str
    :param status_reason: The 128 character-long string that stores the reason for the
        device identity status.
    :type status_reason: str
    :param authentication: The authentication mechanism used by the module.
    :type authentication: AuthenticationMechanism
    :param twin_etag: The string representing a weak ETag for the device twin RFC7232.
    :type twin_etag: str
    :param tags: The JSON document read and written by the solution back end.
    :type tags: dict[str, object]
    :param capabilities: The status of capabilities enabled on the device.
    :type capabilities: DeviceCapabilities
    :param device_scope: The scope of the device.
    :type device_scope: str
    :param parent_scopes: The scopes of the upper level edge devices if applicable.
    :type parent_scopes: list[str]
    """

    _attribute_map = {
        "id": {"key": "id", "type": "str"},
        "module_id": {"key": "moduleId", "type": "str"},
        "e_tag": {"key": "eTag", "type": "str"},
        "import_mode": {"key": "importMode", "type": "str"},
        "status": {"key": "status", "type": "str"},
        "status_reason": {"key": "statusReason", "type": "str"},
        "authentication": {"key": "authentication", "type": "AuthenticationMechanism"},
        "twin_etag": {"key": "twinETag", "type": "str"},
        "tags": {"key": "tags", "type": "{object}"},
        "capabilities": {"key": "capabilities", "type": "DeviceCapabilities"},
        "device_scope": {"key": "deviceScope", "type": "str"},
        "parent_scopes": {"key": "parentScopes", "type": "[str]"},
    }

    def __init__(self, **kwargs):
        super(ExportImportDevice, self).__init__(**kwargs)
        self.id = kwargs.get("id", None)
        self.module_id = kwargs.get("module_id", None)
        self.e_tag = kwargs.get("e_tag", None)
        self.import_mode = kwargs.get("import_mode", None)
        self.status = kwargs.get("status", None)
        self.status_reason = kwargs.get("status_reason", None)
        self.authentication = kwargs.get("authentication", None)
        self.twin_etag = kwargs.get("twin_etag", None)
        self.tags = kwargs.get("tags", None)
        self.capabilities = kwargs.get("capabilities", None)
        self.device_scope = kwargs.get("device_scope", None)
        self.parent_scopes = kwargs.get("parent_scopes", None)


class DeviceRegistryOperationError(Model):
    """Encapsulates device registry operation error details.

    :param device_id: The unique identifier of the device.
    :type device_id: str
    :param error_code: The error code.
    :type error_code: str
    :param error_status: The details of the error.
    :type error_status: str
    :param module_id: The unique identifier of the module, if applicable.
    :type module_id: str
    :param operation: The type of the operation that failed.
    :type operation: str
    """

    _attribute_map = {
        "device_id": {"key": "deviceId", "type": "str"},
        "error_code": {"key": "errorCode", "type": "str"},
        "error_status": {"key": "errorStatus", "type": "str"},
        "module_id": {"key": "moduleId", "type": "str"},
        "operation": {"key": "operation", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(DeviceRegistryOperationError, self).__init__(**kwargs)
        self.device_id = kwargs.get("device_id", None)
        self.error_code = kwargs.get("error_code", None)
        self.error_status = kwargs.get("error_status", None)
        self.module_id = kwargs.get("module_id", None)
        self.operation = kwargs.get("operation", None)


class DeviceRegistryOperationWarning(Model):
    """Encapsulates device registry operation warning details.

    :param device_id: The unique identifier of the device.
    :type device_id: str
    :param warning_code: The warning code.
    :type warning_code: str
    :param warning_status: The details of the warning.
    :type warning_status: str
    """

    _attribute_map = {
        "device_id": {"key": "deviceId", "type": "str"},
        "warning_code": {"key": "warningCode", "type": "str"},
        "warning_status": {"key": "warningStatus", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(DeviceRegistryOperationWarning, self).__init__(**kwargs)
        self.device_id = kwargs.get("device_id", None)
        self.warning_code = kwargs.get("warning_code", None)
        self.warning_status = kwargs.get("warning_status", None)


class BulkRegistryOperationResult(Model):
    """The result of a bulk registry operation.

    :param is_successful: The operation result.
    :type is_successful: bool
    :param errors: The device registry operation errors.
    :type errors: list[DeviceRegistryOperationError]
    :param warnings: The device registry operation warnings.
    :type warnings: list[DeviceRegistryOperationWarning]
    """

    _attribute_map = {
        "is_successful": {"key": "isSuccessful", "type": "bool"},
        "errors": {"key": "errors", "type": "[DeviceRegistryOperationError]"},
        "warnings": {"key": "warnings", "type": "[DeviceRegistryOperationWarning]"},
    }

    def __init__(self, **kwargs):
        super(BulkRegistryOperationResult, self).__init__(**kwargs)
        self.is_successful = kwargs.get("is_successful", None)
        self.errors = kwargs.get("errors", None)
        self.warnings = kwargs.get("warnings", None)


class JobProperties(Model):
    """The properties of an import or export job.

    :param job_id: The unique identifier of the job.
    :type job_id: str
    :param start_time_utc: System generated. The start date and time of the job in UTC.
    :type start_time_utc: datetime
    :param end_time_utc: System generated. The end date and time of the job in UTC.
    :type end_time_utc: datetime
    :param type: The job type. Possible values include: 'export', 'import'
    :type type: str
    :param status: System generated. The status of the job. Possible values include:
        'unknown', 'enqueued', 'running', 'completed', 'failed', 'cancelled'
    :type status: str
    :param progress: System generated. The percentage of the job completed.
    :type progress: int
    :param input_blob_container_uri: The URI containing SAS token to a blob container that
        contains registry data to sync.
    :type input_blob_container_uri: str
    :param input_blob_name: The blob name to use when importing from the input blob container.
    :type input_blob_name: str
    :param output_blob_container_uri: The SAS token to access the blob container.
    :type output_blob_container_uri: str
    :param output_blob_name: The name of the blob that will be created in the output blob
        container.
    :type output_blob_name: str
    :param exclude_keys_in_export: Optional for export jobs; ignored for other jobs.
    :type exclude_keys_in_export: bool
    :param storage_authentication_type: The authentication type used for connecting to the
        storage account. Possible values include: 'keyBased', 'identityBased'
    :type storage_authentication_type: str
    :param failure_reason: System generated. The reason for failure, if a failure occurred.
    :type failure_reason: str
    :param include_configurations: Defaults to false. If true, then configurations are
        included in the data export/import.
    :type include_configurations: bool
    :param configurations_blob_name: Defaults to configurations.txt. Specifies the name of the
        blob to use when exporting/importing configurations.
    :type configurations_blob_name: str
    """

    _attribute_map = {
        "job_id": {"key": "jobId", "type": "str"},
        "start_time_utc": {"key": "startTimeUtc", "type": "iso-8601"},
        "end_time_utc": {"key": "endTimeUtc", "type": "iso-8601"},
        "type": {"key": "type", "type": "str"},
        "status": {"key": "status", "type": "str"},
        "progress": {"key": "progress", "type": "int"},
        "input_blob_container_uri": {"key": "inputBlobContainerUri", "type": "str"},
        "input_blob_name": {"key": "inputBlobName", "type": "str"},
        "output_blob_container_uri": {"key": "outputBlobContainerUri", "type": "str"},
        "output_blob_name": {"key": "outputBlobName", "type": "str"},
        "exclude_keys_in_export": {"key": "excludeKeysInExport", "type": "bool"},
        "storage_authentication_type": {"key": "storageAuthenticationType", "type": "str"},
        "failure_reason": {"key": "failureReason", "type": "str"},
        "include_configurations": {"key": "includeConfigurations", "type": "bool"},
        "configurations_blob_name": {"key": "configurationsBlobName", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(JobProperties, self).__init__(**kwargs)
        self.job_id = kwargs.get("job_id", None)
        self.start_time_utc = kwargs.get("start_time_utc", None)
        self.end_time_utc = kwargs.get("end_time_utc", None)
        self.type = kwargs.get("type", None)
        self.status = kwargs.get("status", None)
        self.progress = kwargs.get("progress", None)
        self.input_blob_container_uri = kwargs.get("input_blob_container_uri", None)
        self.input_blob_name = kwargs.get("input_blob_name", None)
        self.output_blob_container_uri = kwargs.get("output_blob_container_uri", None)
        self.output_blob_name = kwargs.get("output_blob_name", None)
        self.exclude_keys_in_export = kwargs.get("exclude_keys_in_export", None)
        self.storage_authentication_type = kwargs.get("storage_authentication_type", None)
        self.failure_reason = kwargs.get("failure_reason", None)
        self.include_configurations = kwargs.get("include_configurations", None)
        self.configurations_blob_name = kwargs.get("configurations_blob_name", None)


class RegistryStatistics(Model):
    """Statistics about the devices in the IoTHub registry.

    :param total_device_count: The total number of devices registered for the IoT Hub.
    :type total_device_count: long
    :param enabled_device_count: The number of currently enabled devices.
    :type enabled_device_count: long
    :param disabled_device_count: The number of currently disabled devices.
    :type disabled_device_count: long
    """

    _attribute_map = {
        "total_device_count": {"key": "totalDeviceCount", "type": "long"},
        "enabled_device_count": {"key": "enabledDeviceCount", "type": "long"},
        "disabled_device_count": {"key": "disabledDeviceCount", "type": "long"},
    }

    def __init__(self, **kwargs):
        super(RegistryStatistics, self).__init__(**kwargs)
        self.total_device_count = kwargs.get("total_device_count", None)
        self.enabled_device_count = kwargs.get("enabled_device_count", None)
        self.disabled_device_count = kwargs.get("disabled_device_count", None)


class ServiceStatistics(Model):
    """Statistics about the IoTHub service.

    :param connected_device_count: The number of currently connected devices.
    :type connected_device_count: long
    """

    _attribute_map = {"connected_device_count": {"key": "connectedDeviceCount", "type": "long"}}

    def __init__(self, **kwargs):
        super(ServiceStatistics, self).__init__(**kwargs)
        self.connected_device_count = kwargs.get("connected_device_count", None)


client_models = {
    k: v for k, v in globals().items() if isinstance(v, type) and issubclass(v, Model)
}

_serializer = Serializer(client_models)
_deserializer = Deserializer(client_models)


def serialize(model: Any, data_type: str) -> Any:
    """Convert a model (or list of models) into a JSON compatible value

    :param model: The model to serialize
    :param str data_type: The msrest type name, e.g. "Device" or "[ExportImportDevice]"
    :raises: ValueError if the model fails validation
    """
    try:
        return _serializer.body(model, data_type)
    except SerializationError as e:
        raise ValueError("Unable to serialize {}".format(data_type)) from e


def deserialize(data_type: str, data: Any) -> Any:
    """Convert a decoded JSON response body into a model (or list of models)

    :param str data_type: The msrest type name, e.g. "Device" or "[Configuration]"
    :param data: The decoded JSON response body
    :raises: :class:`ResponseFormatError` if the data cannot be converted
    """
    if data is None:
        raise ResponseFormatError("Expected a {} in the response, but there was none".format(data_type))
    try:
        return _deserializer(data_type, data)
    except DeserializationError as e:
        raise ResponseFormatError("Unable to deserialize {}".format(data_type)) from e
