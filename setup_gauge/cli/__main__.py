"""
Entry point for running the setup-gauge CLI as a module.

Usage: python -m setup_gauge.cli [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
