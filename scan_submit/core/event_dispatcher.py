# scan_submit/core/event_dispatcher.py
"""Single-threaded event queue shared by every controller entry point."""
import logging
import threading
from queue import Queue, Empty
from typing import Any, Callable


class EventDispatcher:
    """
    Runs posted handlers one at a time on a single worker thread.

    Camera, button and network callbacks arrive on their own threads; they
    post here so that controller handlers never interleave.
    """

    def __init__(self, queue_timeout: float = 0.5):
        self.logger = logging.getLogger(__name__)
        self.queue_timeout = queue_timeout
        self.events = Queue()
        self.running = False
        self.worker_thread = None

    def post(self, handler: Callable[..., Any], *args) -> None:
        """Queue a handler call. Safe from any thread."""
        self.events.put((handler, args))

    def bind(self, handler: Callable[..., Any]) -> Callable[..., None]:
        """Wrap a handler so that calling the wrapper posts it instead."""
        def _post(*args):
            self.post(handler, *args)
        return _post

    def _dispatch(self, handler, args) -> None:
        try:
            handler(*args)
        except Exception as e:
            self.logger.error(f"Error in event handler {getattr(handler, '__name__', handler)}: {e}")

    def run_pending(self) -> int:
        """Run every queued handler on the calling thread. Returns the count."""
        count = 0
        while True:
            try:
                handler, args = self.events.get_nowait()
            except Empty:
                return count
            self._dispatch(handler, args)
            self.events.task_done()
            count += 1

    def _process_events(self) -> None:
        while self.running:
            try:
                handler, args = self.events.get(timeout=self.queue_timeout)
            except Empty:
                continue
            self._dispatch(handler, args)
            self.events.task_done()

    def start(self) -> None:
        """Start the worker thread."""
        self.running = True
        self.worker_thread = threading.Thread(target=self._process_events, name="event-dispatcher")
        self.worker_thread.daemon = True
        self.worker_thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the worker thread; handlers still queued are dropped."""
        self.running = False
        if self.worker_thread and self.worker_thread.is_alive():
            self.worker_thread.join(timeout=timeout)
        self.worker_thread = None
