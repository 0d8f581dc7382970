import sys

from gift_circulation.cli import main

sys.exit(main())
