"""Allow ``python -m tasktracker``."""

from tasktracker.cli import main

if __name__ == "__main__":
    main()
