"""Top-level pytest configuration.

Qt must run headless before any test module imports PySide6. The shared
application and fixtures live in ``tests/conftest.py``.
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
