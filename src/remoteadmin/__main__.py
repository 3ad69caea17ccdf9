import sys

from remoteadmin.interface.cli import main

sys.exit(main())
