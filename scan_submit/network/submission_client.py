# scan_submit/network/submission_client.py
"""Network module for submitting decoded payloads to the server."""
import requests
import logging
from datetime import datetime
import threading
from queue import Queue, Empty, Full
import time
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass
from urllib.parse import urlparse

from scan_submit.core.session import SubmissionResult

@dataclass
class QueueItem:
    """Data structure for items in the queue."""
    payload: str
    timestamp: float
    on_result: Optional[Callable[[SubmissionResult], None]] = None

class SubmissionClient:
    """Posts one payload per call to the remote endpoint, never retrying."""

    def __init__(self, server_url: str,
                 connection_timeout: float = 10.0,
                 max_queue_size: int = 16,
                 queue_timeout: float = 0.5,
                 default_label: str = "item",
                 session: Optional[requests.Session] = None):
        """Initialize the submission client."""
        self.logger = logging.getLogger(__name__)
        self.server_url = server_url
        self.connection_timeout = connection_timeout
        self.queue_timeout = queue_timeout
        self.default_label = default_label
        self.http = session or requests.Session()
        self.url_error = self._validate_url(server_url)

        self.send_queue = Queue(maxsize=max_queue_size)
        self.running = False
        self.send_thread = None
        self._initialize_health_metrics()

    def _validate_url(self, url: str) -> Optional[str]:
        """Return a description of what is wrong with the URL, or None."""
        try:
            result = urlparse(url)
            if result.scheme not in ("http", "https") or not result.netloc:
                raise ValueError("Invalid URL format")
            result.port  # Raises ValueError on a non-numeric port
        except ValueError as e:
            error = f"Invalid server URL {url!r}: {e}"
            # Not fatal: every submission will report failure instead
            self.logger.warning(error)
            return error
        return None

    def _initialize_health_metrics(self) -> None:
        """Initialize health monitoring metrics."""
        self.health_metrics = {
            'successful_sends': 0,
            'failed_sends': 0,
            'last_successful_send': None,
            'last_error': None
        }
        self.metrics_lock = threading.Lock()

    def _record_failure(self, error: str) -> SubmissionResult:
        with self.metrics_lock:
            self.health_metrics['failed_sends'] += 1
            self.health_metrics['last_error'] = error
        return SubmissionResult.failure(error)

    def _extract_label(self, response: requests.Response) -> str:
        """Pull result.productName out of the response body if it is there."""
        try:
            body = response.json()
        except ValueError:
            return self.default_label
        result = body.get('result') if isinstance(body, dict) else None
        if isinstance(result, dict) and result.get('productName'):
            return str(result['productName'])
        return self.default_label

    def send(self, payload: str) -> SubmissionResult:
        """
        Post a payload and wait for the answer.

        Any request exception, non-2xx status or timeout is reported as the
        same failure. This call never raises for network problems.
        """
        if self.url_error:
            return self._record_failure(self.url_error)

        try:
            self.logger.info(f"Sending to: {self.server_url}")
            response = self.http.post(
                self.server_url,
                json={'data': payload},
                headers={
                    'Content-Type': 'application/json',
                    'User-Agent': 'ScanSubmit/1.0'
                },
                timeout=self.connection_timeout
            )
            response.raise_for_status()
            # raise_for_status lets final 1xx and 3xx answers through
            if not 200 <= response.status_code < 300:
                raise requests.exceptions.HTTPError(
                    f"Unexpected status {response.status_code}", response=response
                )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Error sending payload: {e}")
            return self._record_failure(str(e))

        label = self._extract_label(response)
        with self.metrics_lock:
            self.health_metrics['successful_sends'] += 1
            self.health_metrics['last_successful_send'] = time.time()

        self.logger.info(f"Successfully sent payload ({label})")
        return SubmissionResult.success(label)

    def _deliver(self, item: QueueItem, result: SubmissionResult) -> None:
        if item.on_result:
            try:
                item.on_result(result)
            except Exception as e:
                self.logger.error(f"Error in result callback: {e}")

    def _process_queue(self) -> None:
        """Send queued items one at a time."""
        while self.running:
            try:
                item = self.send_queue.get(timeout=self.queue_timeout)
            except Empty:
                continue

            try:
                result = self.send(item.payload)
            except Exception as e:
                self.logger.error(f"Unexpected error sending payload: {e}")
                result = self._record_failure(str(e))
            finally:
                self.send_queue.task_done()
            self._deliver(item, result)

    def start(self) -> None:
        """Start the sending thread."""
        self.running = True
        self.send_thread = threading.Thread(target=self._process_queue, name="submission-client")
        self.send_thread.daemon = True
        self.send_thread.start()

    def submit(self, payload: str,
               on_result: Optional[Callable[[SubmissionResult], None]] = None) -> None:
        """Queue a payload; on_result is called from the sending thread."""
        item = QueueItem(payload=payload, timestamp=time.time(), on_result=on_result)
        try:
            self.send_queue.put(item, timeout=self.queue_timeout)
        except Full:
            self.logger.error("Send queue full, dropping payload")
            self._deliver(item, self._record_failure("Queue full"))

    def get_health_status(self) -> Dict[str, Any]:
        """Get current health metrics."""
        with self.metrics_lock:
            return self.health_metrics.copy()

    def stop(self, timeout: float = 30.0) -> None:
        """Stop the client, letting an in-flight submission finish."""
        try:
            start_time = time.time()
            while not self.send_queue.empty():
                if time.time() - start_time > timeout:
                    self.logger.warning("Timeout waiting for send queue to empty")
                    break
                time.sleep(0.1)

            self.running = False
            if self.send_thread and self.send_thread.is_alive():
                self.send_thread.join(timeout=self.connection_timeout + 1)

            metrics = self.get_health_status()
            last_send = metrics['last_successful_send']
            self.logger.info(
                f"Submission metrics - Successful sends: {metrics['successful_sends']}, "
                f"Failed sends: {metrics['failed_sends']}, "
                f"Last success: {datetime.fromtimestamp(last_send).isoformat() if last_send else 'never'}"
            )

        except Exception as e:
            self.logger.error(f"Error stopping submission client: {e}")
