# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import asyncio
import pytest
import unittest.mock as mock

"""
NOTE: Tests that need a non-specific, arbitrary exception should use the `arbitrary_exception`
fixture. The exception type is not defined anywhere else, so it can only be handled by broad,
all-encompassing handling, and a test checking that it is raised cannot spuriously pass due to
a different exception being raised.
"""


@pytest.fixture
def arbitrary_exception():
    class ArbitraryException(Exception):
        pass

    e = ArbitraryException("arbitrary description")
    return e


class HangingAsyncMock(mock.AsyncMock):
    """AsyncMock that does not return until told to stop hanging"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.side_effect = self._do_hang
        self._is_hanging = asyncio.Event()
        self._stop_hanging = asyncio.Event()

    async def _do_hang(self, *args, **kwargs):
        self._is_hanging.set()
        await self._stop_hanging.wait()

    async def wait_for_hang(self):
        await self._is_hanging.wait()

    def is_hanging(self):
        return self._is_hanging.is_set()

    def stop_hanging(self):
        self._stop_hanging.set()


@pytest.fixture
def hanging_async_mock():
    """Factory for HangingAsyncMock objects. Must be called from within a running event loop"""
    return HangingAsyncMock
