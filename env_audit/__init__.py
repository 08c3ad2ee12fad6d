"""
env-audit - find environment variable drift in a codebase

Reports variables that are used but never defined, defined but never used,
and names that stray from a naming convention.
"""

__version__ = "0.1.0"
