"""Allow ``python -m bzp``."""

from bzp.cli import main

main()
