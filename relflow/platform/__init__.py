"""Process execution helpers."""

from .process import ProcessError, run, run_shell

__all__ = ["ProcessError", "run", "run_shell"]
