"""
PowerShell script builders for remote host queries and mutations.

Every script sets ErrorActionPreference to Stop so a failing cmdlet yields
a non-zero exit code, and emits a single compressed JSON document on stdout.
Values interpolated into scripts go through ps_quote; addresses are
validated by the caller before they get here.
"""

from typing import Sequence

PREAMBLE = "$ErrorActionPreference = 'Stop'\n$ProgressPreference = 'SilentlyContinue'\n"

# Win32_NetworkAdapterConfiguration method return values
ADAPTER_RETURN_CODES = {
    0: "Successful completion, no reboot required",
    1: "Successful completion, reboot required",
    64: "Method not supported on this platform",
    65: "Unknown failure",
    68: "Invalid input parameter",
    70: "Invalid IP address",
    72: "Error accessing the registry",
    80: "Unable to configure TCP/IP service",
    84: "IP not enabled on adapter",
    91: "Access denied",
    92: "Out of memory",
    95: "Interface not configurable",
    96: "Unable to contact the DNS server",
    97: "Unable to configure DNS service",
}

SUCCESS_RETURN_CODES = (0, 1)


def ps_quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + str(value).replace("'", "''") + "'"


def ps_string_array(values: Sequence[str]) -> str:
    return "[string[]]@(" + ", ".join(ps_quote(v) for v in values) + ")"


def describe_return_code(code: int) -> str:
    return ADAPTER_RETURN_CODES.get(code, f"Unknown return value {code}")


def identity_script() -> str:
    return PREAMBLE + (
        "$cs = Get-CimInstance -ClassName Win32_ComputerSystem\n"
        "[pscustomobject]@{ Name = $cs.Name; UserName = $cs.UserName; Domain = $cs.Domain } "
        "| ConvertTo-Json -Compress\n"
    )


def active_address_script() -> str:
    """Prefer the adapter with a default gateway, else the first IP-enabled one."""
    return PREAMBLE + (
        "$configs = @(Get-CimInstance -ClassName Win32_NetworkAdapterConfiguration -Filter 'IPEnabled = True')\n"
        "$active = $configs | Where-Object { $_.DefaultIPGateway } | Select-Object -First 1\n"
        "if (-not $active) { $active = $configs | Select-Object -First 1 }\n"
        "if (-not $active) { throw 'No IP-enabled network adapter found' }\n"
        "$ipv4 = @($active.IPAddress | Where-Object { $_ -match '^\\d{1,3}(\\.\\d{1,3}){3}$' })\n"
        "if ($ipv4.Count -eq 0) { throw \"Adapter $($active.Index) has no IPv4 address\" }\n"
        "[pscustomobject]@{ Index = $active.Index; Address = $ipv4[0] } | ConvertTo-Json -Compress\n"
    )


def find_interface_script(address: str) -> str:
    return PREAMBLE + (
        f"$address = {ps_quote(address)}\n"
        "$cfg = Get-CimInstance -ClassName Win32_NetworkAdapterConfiguration -Filter 'IPEnabled = True' |\n"
        "    Where-Object { $_.IPAddress -contains $address } | Select-Object -First 1\n"
        "if (-not $cfg) { throw \"No IP-enabled adapter is bound to $address\" }\n"
        "[pscustomobject]@{ Index = $cfg.Index; Description = $cfg.Description; "
        "Addresses = @($cfg.IPAddress) } | ConvertTo-Json -Compress\n"
    )


def _adapter_lookup(index: int) -> str:
    return (
        f"$cfg = Get-CimInstance -ClassName Win32_NetworkAdapterConfiguration -Filter 'Index = {int(index)}'\n"
        f"if (-not $cfg) {{ throw 'Network adapter {int(index)} not found' }}\n"
    )


def get_dns_servers_script(index: int) -> str:
    return PREAMBLE + _adapter_lookup(index) + (
        "ConvertTo-Json -Compress -InputObject @($cfg.DNSServerSearchOrder | Where-Object { $_ })\n"
    )


def set_dns_servers_script(index: int, addresses: Sequence[str]) -> str:
    return PREAMBLE + _adapter_lookup(index) + (
        f"$servers = {ps_string_array(addresses)}\n"
        "$result = Invoke-CimMethod -InputObject $cfg -MethodName SetDNSServerSearchOrder "
        "-Arguments @{ DNSServerSearchOrder = $servers }\n"
        "[pscustomobject]@{ ReturnValue = [int]$result.ReturnValue } | ConvertTo-Json -Compress\n"
    )


def reregister_dns_script() -> str:
    return PREAMBLE + (
        "Register-DnsClient\n"
        "[pscustomobject]@{ ReturnValue = 0 } | ConvertTo-Json -Compress\n"
    )
