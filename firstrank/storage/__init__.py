"""
Record Store

Modules:
- database: Headerless CSV collections of !first submissions
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "Database":
        from firstrank.storage.database import Database
        return Database
    if name == "Submission":
        from firstrank.storage.database import Submission
        return Submission
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
