#!/usr/bin/env python

# pylint: disable=redefined-outer-name

"""Configures execution of pytest."""

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio

from aiohttp.test_utils import TestServer
from click.testing import CliRunner

from docker_registry_inspect import RegistryClient, RegistryTransport

from .stubs import FakeTransport, RegistryStub


@pytest.fixture
def clirunner() -> Generator[CliRunner, None, None]:
    """Provides a runner for testing click command line interfaces."""
    runner = CliRunner()
    with runner.isolated_filesystem():
        yield runner


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Provides a transport that answers from canned responses."""
    return FakeTransport()


@pytest.fixture
def registry_client(fake_transport: FakeTransport) -> RegistryClient:
    """Provides a RegistryClient bound to the fake transport."""
    return RegistryClient("https://fake.registry", transport=fake_transport)


@pytest_asyncio.fixture
async def registry_stub() -> AsyncGenerator[RegistryStub, None]:
    """Provides an in-process registry listening on a local port."""
    stub = RegistryStub()
    server = TestServer(stub.app)
    await server.start_server()
    stub.url = str(server.make_url("/")).rstrip("/")
    yield stub
    await server.close()


@pytest_asyncio.fixture
async def registry_transport(
    registry_stub: RegistryStub,
) -> AsyncGenerator[RegistryTransport, None]:
    """Provides a RegistryTransport bound to the in-process registry."""
    async with RegistryTransport(registry_stub.url) as transport:
        yield transport
