import sys

from loopcard.cli import main

sys.exit(main())
