"""
Entry point for running jdkkit as a module.

Usage: python -m jdkkit [options]
"""

from jdkkit.cli.parser import main

if __name__ == "__main__":
    main()
