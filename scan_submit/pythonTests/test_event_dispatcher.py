# pythonTests/test_event_dispatcher.py
import threading

from scan_submit.core.event_dispatcher import EventDispatcher


def test_run_pending_preserves_order():
    dispatcher = EventDispatcher()
    seen = []

    dispatcher.post(seen.append, 1)
    dispatcher.post(seen.append, 2)
    dispatcher.bind(seen.append)(3)

    assert seen == []
    assert dispatcher.run_pending() == 3
    assert seen == [1, 2, 3]


def test_handlers_posted_while_draining_run_in_same_pass():
    dispatcher = EventDispatcher()
    seen = []

    def first():
        seen.append("first")
        dispatcher.post(seen.append, "second")

    dispatcher.post(first)
    dispatcher.run_pending()

    assert seen == ["first", "second"]


def test_failing_handler_does_not_stop_the_queue():
    dispatcher = EventDispatcher()
    seen = []

    def broken():
        raise RuntimeError("handler failed")

    dispatcher.post(broken)
    dispatcher.post(seen.append, "after")

    assert dispatcher.run_pending() == 2
    assert seen == ["after"]


def test_worker_thread_runs_posted_handlers():
    dispatcher = EventDispatcher(queue_timeout=0.05)
    threads = []
    done = threading.Event()

    def handler():
        threads.append(threading.current_thread().name)
        done.set()

    dispatcher.start()
    try:
        dispatcher.post(handler)
        assert done.wait(timeout=5)
    finally:
        dispatcher.stop()

    assert threads == ["event-dispatcher"]
    assert dispatcher.worker_thread is None
