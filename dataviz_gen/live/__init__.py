from .scheduler import UpdateScheduler

__all__ = ["UpdateScheduler"]
