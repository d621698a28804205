import sys

from shcw.cli import main

sys.exit(main())
