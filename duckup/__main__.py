"""
Entry point for running duckup as a module.

Usage: python -m duckup [command] [options]
"""

from duckup.cli.parser import main

if __name__ == "__main__":
    main()
