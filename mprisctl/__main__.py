import sys

from mprisctl.cli import main

sys.exit(main())
