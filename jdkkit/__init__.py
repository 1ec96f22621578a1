"""
jdkkit - install and cache AdoptOpenJDK builds for CI runners.
"""

__version__ = "0.1.0"
