"""
Tests for the WinRM session wrapper and WinRMSystemClient.

pywinrm is replaced by a session factory returning a MagicMock whose
run_cmd/run_ps responses are queued per test.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError
from winrm.exceptions import InvalidCredentialsError, WinRMOperationTimeoutError

from remoteadmin.domain.config import Credential, SessionCredentials, WinRMSettings
from remoteadmin.domain.errors import AdminError, ErrorKind
from remoteadmin.domain.models import NetworkInterfaceRef
from remoteadmin.infrastructure.psremoting.connection_client import open_session
from remoteadmin.infrastructure.psremoting.system_client import WinRMSystemClient


def response(stdout="", status_code=0, stderr=""):
    return SimpleNamespace(
        status_code=status_code,
        std_out=stdout.encode("utf-8"),
        std_err=stderr.encode("utf-8"),
    )


class FakeWinRM:
    """Session factory; records constructor kwargs and hands out one mock."""

    def __init__(self, probe=None, ps_responses=()):
        self.kwargs = None
        self.session = MagicMock()
        if isinstance(probe, Exception):
            self.session.run_cmd.side_effect = probe
        else:
            self.session.run_cmd.return_value = probe or response("WIN10\r\n")
        self.session.run_ps.side_effect = list(ps_responses)

    def __call__(self, **kwargs):
        self.kwargs = kwargs
        return self.session


@pytest.fixture
def supplied():
    return SessionCredentials.supplied(Credential(username="CORP\\admin", password="s3cret"))


INTERFACE = NetworkInterfaceRef(index=7, description="Intel(R) Ethernet", addresses=["192.168.2.60"])


class TestOpenSession:
    """Test cases for open_session."""

    def test_supplied_credentials_use_configured_transport(self, supplied):
        factory = FakeWinRM()

        session = open_session("WIN10", supplied, WinRMSettings(), session_factory=factory)

        assert session.hostname == "WIN10"
        assert session.transport == "ntlm"
        assert factory.kwargs["target"] == "http://WIN10:5985/wsman"
        assert factory.kwargs["auth"] == ("CORP\\admin", "s3cret")
        assert factory.kwargs["operation_timeout_sec"] == 20
        assert factory.kwargs["read_timeout_sec"] == 30
        factory.session.run_cmd.assert_called_once_with("hostname")

    def test_ambient_credentials_use_ambient_transport(self):
        factory = FakeWinRM()
        settings = WinRMSettings(use_ssl=True, verify_ssl=False)

        session = open_session("WIN10", SessionCredentials.ambient(), settings, session_factory=factory)

        assert session.transport == "kerberos"
        assert factory.kwargs["auth"] == (None, None)
        assert factory.kwargs["target"] == "https://WIN10:5986/wsman"
        assert factory.kwargs["server_cert_validation"] == "ignore"

    @pytest.mark.parametrize("error", [
        InvalidCredentialsError("the specified credentials were rejected by the server"),
        RequestsConnectionError("Max retries exceeded"),
        WinRMOperationTimeoutError(),
    ])
    def test_transport_errors_become_connection_errors(self, supplied, error):
        factory = FakeWinRM(probe=error)

        with pytest.raises(AdminError) as exc_info:
            open_session("WIN10", supplied, WinRMSettings(), session_factory=factory)

        assert exc_info.value.kind == ErrorKind.CONNECTION
        assert exc_info.value.step == "connect"
        assert exc_info.value.cause is error
        assert exc_info.value.error_name == type(error).__name__

    def test_failed_probe_is_connection_error(self, supplied):
        factory = FakeWinRM(probe=response(status_code=1, stderr="Access is denied."))

        with pytest.raises(AdminError) as exc_info:
            open_session("WIN10", supplied, WinRMSettings(), session_factory=factory)

        assert exc_info.value.kind == ErrorKind.CONNECTION
        assert exc_info.value.error_text == "Access is denied."

    def test_run_ps_decodes_output(self, supplied):
        factory = FakeWinRM(ps_responses=[response("ok\r\n", status_code=1, stderr="warning")])
        session = open_session("WIN10", supplied, WinRMSettings(), session_factory=factory)

        result = session.run_ps("Get-Date")

        assert not result.success
        assert result.exit_code == 1
        assert result.stdout == "ok\r\n"
        assert result.stderr == "warning"
        assert not hasattr(session, "run_cmd")

    def test_closed_session_refuses_commands(self, supplied):
        session = open_session("WIN10", supplied, WinRMSettings(), session_factory=FakeWinRM())
        session.close()

        assert not session.is_open
        with pytest.raises(AdminError):
            session.run_ps("Get-Date")


class TestWinRMSystemClient:
    """Test cases for WinRMSystemClient queries and mutations."""

    def _client(self, *ps_responses):
        factory = FakeWinRM(ps_responses=ps_responses)
        client = WinRMSystemClient(WinRMSettings(), session_factory=factory)
        session = client.connect("WIN10")
        return client, session, factory

    def test_connect_defaults_to_ambient_identity(self):
        client, session, factory = self._client()
        assert session.credentials.is_ambient
        assert factory.kwargs["transport"] == "kerberos"

    def test_get_identity(self):
        client, session, _ = self._client(
            response('{"Name":"WIN10","UserName":"CORP\\\\jdoe","Domain":"corp.local"}')
        )

        identity = client.get_identity(session)

        assert identity.name == "WIN10"
        assert identity.primary_user == "CORP\\jdoe"
        assert identity.domain == "corp.local"

    def test_get_identity_without_user(self):
        client, session, _ = self._client(response('{"Name":"WIN10","UserName":null,"Domain":"WORKGROUP"}'))
        assert client.get_identity(session).primary_user is None

    def test_get_identity_without_name_is_query_error(self):
        client, session, _ = self._client(response("{}"))

        with pytest.raises(AdminError) as exc_info:
            client.get_identity(session)

        assert exc_info.value.kind == ErrorKind.QUERY
        assert exc_info.value.step == "get_identity"

    def test_get_active_address(self):
        client, session, _ = self._client(response('{"Index":7,"Address":"192.168.2.60"}'))
        assert client.get_active_address(session) == "192.168.2.60"

    def test_find_interface(self):
        client, session, factory = self._client(
            response('{"Index":7,"Description":"Intel(R) Ethernet","Addresses":["192.168.2.60","fe80::1"]}')
        )

        interface = client.find_interface(session, "192.168.2.60")

        assert interface.index == 7
        assert interface.addresses == ["192.168.2.60", "fe80::1"]
        assert "'192.168.2.60'" in factory.session.run_ps.call_args[0][0]

    def test_find_interface_script_error_is_query_error(self):
        client, session, _ = self._client(
            response(status_code=1, stderr="No IP-enabled adapter is bound to 10.0.0.1")
        )

        with pytest.raises(AdminError) as exc_info:
            client.find_interface(session, "10.0.0.1")

        assert exc_info.value.kind == ErrorKind.QUERY
        assert exc_info.value.step == "find_interface"
        assert "10.0.0.1" in exc_info.value.error_text

    @pytest.mark.parametrize("stdout, expected", [
        ('["192.168.1.1","192.168.2.1"]', ["192.168.1.1", "192.168.2.1"]),
        ('"192.168.1.1"', ["192.168.1.1"]),
        ("[]", []),
        ("", []),
    ])
    def test_get_dns_servers(self, stdout, expected):
        client, session, _ = self._client(response(stdout))
        assert client.get_dns_servers(session, INTERFACE) == expected

    def test_set_dns_servers_sends_ordered_list(self):
        client, session, factory = self._client(response('{"ReturnValue":0}'))

        client.set_dns_servers(session, INTERFACE, ["192.168.1.1", "192.168.1.2", "8.8.8.8"])

        script = factory.session.run_ps.call_args[0][0]
        assert "[string[]]@('192.168.1.1', '192.168.1.2', '8.8.8.8')" in script
        assert "SetDNSServerSearchOrder" in script
        assert "'Index = 7'" in script

    def test_set_dns_servers_reboot_required_is_success(self):
        client, session, _ = self._client(response('{"ReturnValue":1}'))
        client.set_dns_servers(session, INTERFACE, ["8.8.8.8"])

    def test_set_dns_servers_failure_code_is_mutation_error(self):
        client, session, _ = self._client(response('{"ReturnValue":91}'))

        with pytest.raises(AdminError) as exc_info:
            client.set_dns_servers(session, INTERFACE, ["8.8.8.8"])

        assert exc_info.value.kind == ErrorKind.MUTATION
        assert exc_info.value.step == "set_dns_servers"
        assert exc_info.value.error_text == "Access denied"

    def test_set_dns_servers_transport_error_is_mutation_error(self):
        client, session, _ = self._client(RequestsConnectionError("connection reset"))

        with pytest.raises(AdminError) as exc_info:
            client.set_dns_servers(session, INTERFACE, ["8.8.8.8"])

        assert exc_info.value.kind == ErrorKind.MUTATION
        assert exc_info.value.error_name == "ConnectionError"

    def test_reregister_dns_failure_is_mutation_error(self):
        client, session, _ = self._client(
            response(status_code=1, stderr="Register-DnsClient : Access denied")
        )

        with pytest.raises(AdminError) as exc_info:
            client.reregister_dns(session)

        assert exc_info.value.kind == ErrorKind.MUTATION
        assert exc_info.value.step == "reregister_dns"

    def test_unparseable_output_is_query_error(self):
        client, session, _ = self._client(response("WARNING: something"))

        with pytest.raises(AdminError) as exc_info:
            client.get_active_address(session)

        assert exc_info.value.kind == ErrorKind.QUERY
        assert exc_info.value.error_name == "JSONDecodeError"
