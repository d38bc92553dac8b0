# -*- coding: utf-8 -*-
"""
Centralized Qt imports.

Every Qt import goes through this module so the binding (PySide6) is chosen
in one place. The core only needs QtCore: signals, timers and the thread pool.
"""

from PySide6.QtCore import (
    QObject,
    QTimer,
    QCoreApplication,
    Signal,
    Slot,
    Property,
    QRunnable,
    QThreadPool,
)
