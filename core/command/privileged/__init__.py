from .executor import DEFAULT_WRAPPER, PrivilegedExecutor

__all__ = ["DEFAULT_WRAPPER", "PrivilegedExecutor"]
