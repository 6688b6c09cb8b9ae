""" IoTHub Registry Service

This package provides clients for the registry operations of an IoTHub (devices, modules,
configurations and import/export jobs), along with the classification of failed responses
into typed, retry-aware errors.
"""

from .service_client import IoTHubServiceClient  # noqa: F401
from .errors import ErrorKind, IoTHubServiceError, classify  # noqa: F401
from .retry_policy import RetryPolicy, retry_transient  # noqa: F401
from .models import (  # noqa: F401
    AuthenticationMechanism,
    BulkRegistryOperationResult,
    Configuration,
    ConfigurationContent,
    ConfigurationQueriesTestInput,
    ConfigurationQueriesTestResponse,
    Device,
    DeviceCapabilities,
    ExportImportDevice,
    ImportMode,
    JobProperties,
    Module,
    RegistryStatistics,
    ServiceStatistics,
    SymmetricKey,
    X509Thumbprint,
)
