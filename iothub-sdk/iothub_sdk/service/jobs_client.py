# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
from typing import List, Optional
from . import http_path
from . import models
from .errors import ErrorKind
from .http_client import IoTHubServiceHTTPClient, GET, POST, DELETE, validate_id
from .models import JobProperties

logger = logging.getLogger(__name__)

JOB_TYPE_EXPORT = "export"
JOB_TYPE_IMPORT = "import"


class JobsClient:
    """Client for the bulk import and export jobs of an IoTHub registry.

    Jobs are executed by IoTHub. This client only submits, monitors and cancels them.

    Not intended to be instantiated directly. Use the `.jobs` attribute of an
    IoTHubServiceClient instead.
    """

    def __init__(self, http_client: IoTHubServiceHTTPClient) -> None:
        self._http_client = http_client

    async def create_export_job(
        self,
        output_blob_container_uri: str,
        exclude_keys_in_export: bool = False,
        **kwargs
    ) -> JobProperties:
        """Creates a job exporting the device registry to a blob container.

        :param str output_blob_container_uri: The URI (with SAS token) of the blob container
            to export to.
        :param bool exclude_keys_in_export: If True, authentication keys are not exported.
        :param kwargs: Additional JobProperties values (e.g. output_blob_name).

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The JobProperties object of the created job.
        """
        validate_id(output_blob_container_uri, "output_blob_container_uri")
        job_properties = JobProperties(
            type=JOB_TYPE_EXPORT,
            output_blob_container_uri=output_blob_container_uri,
            exclude_keys_in_export=exclude_keys_in_export,
            **kwargs
        )
        return await self._create_job(job_properties)

    async def create_import_job(
        self, input_blob_container_uri: str, output_blob_container_uri: str, **kwargs
    ) -> JobProperties:
        """Creates a job importing device identities from a blob container.

        :param str input_blob_container_uri: The URI (with SAS token) of the blob container
            holding the devices to import.
        :param str output_blob_container_uri: The URI (with SAS token) of the blob container
            the import log is written to.
        :param kwargs: Additional JobProperties values (e.g. input_blob_name).

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The JobProperties object of the created job.
        """
        validate_id(input_blob_container_uri, "input_blob_container_uri")
        validate_id(output_blob_container_uri, "output_blob_container_uri")
        job_properties = JobProperties(
            type=JOB_TYPE_IMPORT,
            input_blob_container_uri=input_blob_container_uri,
            output_blob_container_uri=output_blob_container_uri,
            **kwargs
        )
        return await self._create_job(job_properties)

    async def get(self, job_id: str) -> JobProperties:
        """Retrieves the status of an import or export job.

        :param str job_id: The ID of the job.

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The JobProperties object containing the requested job.
        """
        validate_id(job_id, "job_id")
        response = await self._http_client.request(
            GET,
            http_path.get_jobs_path(job_id),
            expected_status=200,
            not_found_kind=ErrorKind.JOB_NOT_FOUND,
        )
        return models.deserialize("JobProperties", response)

    async def get_all(self) -> List[JobProperties]:
        """Retrieves the status of all import and export jobs of an IoTHub.

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The list[JobProperties] object.
        """
        response = await self._http_client.request(
            GET, http_path.get_jobs_path(), expected_status=200
        )
        return models.deserialize("[JobProperties]", response)

    async def cancel(self, job_id: str) -> Optional[JobProperties]:
        """Cancels an import or export job.

        :param str job_id: The ID of the job.

        :raises: :class:`IoTHubServiceError` if IoTHub does not respond with status 200.

        :returns: The JobProperties object of the cancelled job, if IoTHub returned one.
        """
        validate_id(job_id, "job_id")
        logger.debug("Cancelling job {}".format(job_id))
        response = await self._http_client.request(
            DELETE,
            http_path.get_jobs_path(job_id),
            expected_status=200,
            not_found_kind=ErrorKind.JOB_NOT_FOUND,
        )
        if response is None:
            return None
        return models.deserialize("JobProperties", response)

    async def _create_job(self, job_properties: JobProperties) -> JobProperties:
        logger.debug("Creating {} job".format(job_properties.type))
        response = await self._http_client.request(
            POST,
            http_path.get_jobs_create_path(),
            expected_status=200,
            body=models.serialize(job_properties, "JobProperties"),
        )
        return models.deserialize("JobProperties", response)
