import sys

from spotty.cli import main

sys.exit(main())
