from .messages import ErrorMessage

__all__ = ["ErrorMessage"]
