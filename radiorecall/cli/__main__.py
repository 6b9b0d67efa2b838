"""Allow ``python -m radiorecall.cli <stream_url>`` execution."""

import sys

from radiorecall.cli.record import main

sys.exit(main())
