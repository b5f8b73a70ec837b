"""
Top-level package for the Task Tracker API.

This file makes ``task_tracker_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``task_tracker_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
