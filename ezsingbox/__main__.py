import sys

from ezsingbox.cli import main

sys.exit(main())
