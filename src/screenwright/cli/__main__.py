"""Main entry point for screenwright CLI when run as a module."""

from screenwright.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
