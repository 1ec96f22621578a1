"""
Entry point for running the jdkkit CLI as a module.

Usage: python -m jdkkit.cli [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
