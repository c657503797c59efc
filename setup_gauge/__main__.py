"""
Entry point for running setup-gauge as a module.

Usage: python -m setup_gauge [options]
"""

from setup_gauge.cli.parser import main

if __name__ == "__main__":
    main()
