import sys

from village.app import main

sys.exit(main())
