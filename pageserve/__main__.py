import sys

from pageserve.server import main

sys.exit(main())
