"""C2C Kit -- command-line helpers for the C2C community starter kit.

Provides the interactive project scaffolder (``c2c-kit create``), a Supabase
database setup helper, a security checker and a setup verifier.
"""

__version__ = "0.1.0"
