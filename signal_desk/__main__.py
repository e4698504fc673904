"""
Main entry point for the signal_desk package.

Usage:
    python -m signal_desk [command] [options]

See 'python -m signal_desk --help' for available commands.
"""

from signal_desk.cli import main

if __name__ == "__main__":
    main()
