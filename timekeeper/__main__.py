import sys

from timekeeper.cli import main

sys.exit(main())
