"""
Entry point for running the duckup CLI as a module.

Usage: python -m duckup.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
