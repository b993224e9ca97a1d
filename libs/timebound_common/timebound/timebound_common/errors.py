class BaseTimeboundError(Exception):
    """Base exception for all timebound errors."""
