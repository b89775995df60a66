"""Background maintenance tasks for the backend."""

from .cleanup import cleanup_loop, run_cleanup_pass

__all__ = ["cleanup_loop", "run_cleanup_pass"]
