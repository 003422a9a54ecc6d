"""Allow running schemawalk with ``python -m schemawalk``."""
import sys

from schemawalk.schemawalk import main

sys.exit(main())
