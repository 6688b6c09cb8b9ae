# --------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import urllib.parse
from typing import Optional


def _quote(s: str) -> str:
    return urllib.parse.quote(s, safe="")


def get_devices_path(device_id: Optional[str] = None) -> str:
    """
    :return: The path for the device registry, or for a single device. It is of the format
    /devices or /devices/uri_encode($device_id)
    """
    if device_id:
        return "/devices/{}".format(_quote(device_id))
    return "/devices"


def get_modules_path(device_id: str, module_id: Optional[str] = None) -> str:
    """
    :return: The path for the modules on a device, or for a single module. It is of the format
    /devices/uri_encode($device_id)/modules[/uri_encode($module_id)]
    """
    path = "/devices/{}/modules".format(_quote(device_id))
    if module_id:
        path += "/{}".format(_quote(module_id))
    return path


def get_configurations_path(configuration_id: Optional[str] = None) -> str:
    """
    :return: The path for configurations, or for a single configuration. It is of the format
    /configurations or /configurations/uri_encode($configuration_id)
    """
    if configuration_id:
        return "/configurations/{}".format(_quote(configuration_id))
    return "/configurations"


def get_configurations_test_queries_path() -> str:
    return "/configurations/testQueries"


def get_apply_configuration_content_path(device_id: str) -> str:
    """
    :return: The path for applying configuration content to an edge device. It is of the format
    /devices/uri_encode($device_id)/applyConfigurationContent
    """
    return "/devices/{}/applyConfigurationContent".format(_quote(device_id))


def get_jobs_create_path() -> str:
    return "/jobs/create"


def get_jobs_path(job_id: Optional[str] = None) -> str:
    """
    :return: The path for import/export jobs, or for a single job. It is of the format
    /jobs or /jobs/uri_encode($job_id)
    """
    if job_id:
        return "/jobs/{}".format(_quote(job_id))
    return "/jobs"


def get_device_statistics_path() -> str:
    return "/statistics/devices"


def get_service_statistics_path() -> str:
    return "/statistics/service"
