import sys

from plugincheck.cli import main

sys.exit(main())
