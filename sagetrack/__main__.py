import sys

from sagetrack.cli import main

sys.exit(main())
