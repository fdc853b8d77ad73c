"""Allow running the CLI as `python -m magicpod_batch_runner`."""

import sys

from magicpod_batch_runner.cli import main

sys.exit(main())
