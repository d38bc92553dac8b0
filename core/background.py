# -*- coding: utf-8 -*-
"""
Runs slow or side-effecting shell work on Qt's global thread pool.

A task cannot be aborted once dispatched; callers that lose interest simply
ignore its result.
"""
import sys
import traceback
from typing import Any, Callable, Optional

from gui.qt import QObject, QRunnable, QThreadPool, Signal


class TaskSignals(QObject):
    """Signals must live on a QObject; QRunnable is not one."""
    finished = Signal(object)
    failed = Signal(str)


class BackgroundTask(QRunnable):
    """Runs `func` on a worker thread and reports back through `signals`."""

    def __init__(self, func: Callable[[], Any]):
        super().__init__()
        self._func = func
        self.signals = TaskSignals()

    def run(self):
        try:
            result = self._func()
        except Exception as e:
            detail = "".join(traceback.format_exception(type(e), e, e.__traceback__))
            print(f"Background task failed:\n{detail}", file=sys.stderr)
            self.signals.failed.emit(str(e))
            return
        self.signals.finished.emit(result)


def run_in_background(func: Callable[[], Any],
                      on_finished: Optional[Callable[[Any], None]] = None,
                      on_failed: Optional[Callable[[str], None]] = None,
                      pool: Optional[QThreadPool] = None) -> BackgroundTask:
    """
    Dispatches `func` to the thread pool.

    Callbacks that are slots of a QObject run on that object's thread; plain
    functions run on the worker thread.
    """
    task = BackgroundTask(func)
    if on_finished:
        task.signals.finished.connect(on_finished)
    if on_failed:
        task.signals.failed.connect(on_failed)
    (pool or QThreadPool.globalInstance()).start(task)
    return task
