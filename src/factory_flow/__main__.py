"""Allow ``python -m factory_flow``."""

import sys

from factory_flow.run import main

sys.exit(main())
