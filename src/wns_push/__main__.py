"""Allow running the command line with ``python -m wns_push``."""

from wns_push.app.cli import main

if __name__ == "__main__":
    main()
