"""
remoteadmin - Windows Remote Administration Utilities

Confirm target identity, change a host's DNS server list, and run piped
PowerShell commands stage by stage.
"""

import sys
from remoteadmin.interface.cli import main


if __name__ == "__main__":
    sys.exit(main())
