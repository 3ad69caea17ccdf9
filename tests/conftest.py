"""
Shared fixtures: in-memory RemoteSystemClient and stage evaluator fakes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pytest

from remoteadmin.domain.errors import AdminError
from remoteadmin.domain.models import NetworkInterfaceRef, SystemIdentity
from remoteadmin.domain.ports import NO_INPUT


class FakeSession:
    """Session handle handed out by FakeSystemClient."""

    def __init__(self, hostname: str):
        self.hostname = hostname
        self.closed = False

    def close(self) -> None:
        self.closed = True


class FakeSystemClient:
    """
    RemoteSystemClient fake.

    `failures` maps an operation name to the AdminError it raises.
    Every call is appended to `calls` as (operation, args).
    """

    MUTATIONS = ("set_dns_servers", "reregister_dns")

    def __init__(
        self,
        name: str = "WIN10",
        address: str = "192.168.2.60",
        user: Optional[str] = "CORP\\jdoe",
        dns_servers: Optional[List[str]] = None,
        failures: Optional[Dict[str, AdminError]] = None,
        readback: Optional[List[str]] = None,
    ):
        self.name = name
        self.address = address
        self.user = user
        self.dns_servers = list(dns_servers if dns_servers is not None else ["192.168.1.1", "192.168.2.1"])
        self.failures = failures or {}
        self.readback = readback
        self.calls: List[tuple] = []
        self.sessions: List[FakeSession] = []
        self.interface = NetworkInterfaceRef(index=7, description="Intel(R) Ethernet", addresses=[address])

    def _call(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if operation in self.failures:
            raise self.failures[operation]

    @property
    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]

    @property
    def mutated(self) -> bool:
        return any(op in self.MUTATIONS for op in self.operations)

    def connect(self, target, credentials=None):
        self._call("connect", target, credentials)
        session = FakeSession(target)
        self.sessions.append(session)
        return session

    def get_identity(self, session):
        self._call("get_identity")
        return SystemIdentity(name=self.name, primary_user=self.user, domain="CORP")

    def get_active_address(self, session):
        self._call("get_active_address")
        return self.address

    def find_interface(self, session, address):
        self._call("find_interface", address)
        return self.interface

    def get_dns_servers(self, session, interface):
        self._call("get_dns_servers", interface.index)
        if self.readback is not None and "set_dns_servers" in self.operations:
            return list(self.readback)
        return list(self.dns_servers)

    def set_dns_servers(self, session, interface, addresses: Sequence[str]):
        self._call("set_dns_servers", interface.index, list(addresses))
        self.dns_servers = list(addresses)

    def reregister_dns(self, session):
        self._call("reregister_dns")


class RecordingEvaluator:
    """
    StageEvaluator fake.

    Each stage's result is "<input>><stage>" so threading is visible;
    `inputs` records what every stage received.
    """

    def __init__(self, fail_on: Optional[str] = None):
        self.inputs: List[Any] = []
        self.fail_on = fail_on

    def evaluate(self, command: str, pipeline_input: Any = NO_INPUT) -> Any:
        self.inputs.append(pipeline_input)
        if command == self.fail_on:
            raise AdminError.query(f"Stage '{command}' failed", step="evaluate_stage", detail="boom")
        if pipeline_input is NO_INPUT:
            return command
        return f"{pipeline_input}>{command}"


@pytest.fixture
def fake_client() -> FakeSystemClient:
    return FakeSystemClient()


@pytest.fixture
def evaluator() -> RecordingEvaluator:
    return RecordingEvaluator()
