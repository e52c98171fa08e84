# scan_submit/core/camera_source.py
"""Camera capture and QR decoding for the scan-submit station."""
import logging
import threading
import time

import backoff
import cv2
from pyzbar.pyzbar import decode, ZBarSymbol

from scan_submit.config.settings import CameraConfig


class CameraError(RuntimeError):
    """Raised when the capture device cannot be opened or read."""


class CameraSource:
    def __init__(self, on_decode, device_index=CameraConfig.DEVICE_INDEX,
                 scan_interval=CameraConfig.SCAN_INTERVAL):
        """Initialize the camera source; on_decode receives payload strings."""
        self.logger = logging.getLogger(__name__)
        self.on_decode = on_decode
        self.device_index = device_index
        self.scan_interval = scan_interval
        self.capture = None
        self.running = False
        self.scan_thread = None
        self._scanning = threading.Event()
        self._scanning.set()

    @property
    def scanning_enabled(self):
        return self._scanning.is_set()

    def set_scanning_enabled(self, enabled):
        """Enable or disable decoding; no events are emitted while disabled."""
        if enabled:
            self._scanning.set()
        else:
            self._scanning.clear()
        self.logger.debug(f"Scanning {'enabled' if enabled else 'disabled'}")

    @backoff.on_exception(
        backoff.expo,
        CameraError,
        max_tries=CameraConfig.OPEN_MAX_TRIES,
        max_time=CameraConfig.OPEN_MAX_TIME
    )
    def _open_capture(self):
        """Open the capture device, retrying while it comes up."""
        capture = cv2.VideoCapture(self.device_index)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Cannot open camera {self.device_index}")
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, CameraConfig.FRAME_WIDTH)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, CameraConfig.FRAME_HEIGHT)
        return capture

    def decode_frame(self, frame):
        """Return the QR payloads found in a frame."""
        payloads = []
        for symbol in decode(frame, symbols=[ZBarSymbol.QRCODE]):
            try:
                payloads.append(symbol.data.decode("utf-8"))
            except UnicodeDecodeError:
                self.logger.warning("Skipping QR code with non UTF-8 payload")
        return payloads

    def scan_once(self, frame):
        """Decode a frame and emit each payload if scanning is enabled."""
        if not self.scanning_enabled:
            return 0
        payloads = self.decode_frame(frame)
        for payload in payloads:
            self.on_decode(payload)
        return len(payloads)

    def scanning_loop(self):
        """Main loop for frame capture and decoding."""
        while self.running:
            try:
                if not self._scanning.wait(timeout=0.5):
                    continue
                ok, frame = self.capture.read()
                if not ok:
                    self.logger.warning("Failed to read frame from camera")
                    time.sleep(0.5)
                    continue
                self.scan_once(frame)
            except Exception as e:
                self.logger.error(f"Error in scanning loop: {e}")
                time.sleep(0.5)

            time.sleep(self.scan_interval)

    def start(self):
        """Open the camera and start scanning."""
        self.capture = self._open_capture()
        self.running = True
        self.scan_thread = threading.Thread(target=self.scanning_loop, name="camera-source")
        self.scan_thread.daemon = True
        self.scan_thread.start()
        self.logger.info(f"Camera {self.device_index} started")

    def stop(self):
        """Stop scanning and release the camera."""
        self.running = False
        if self.scan_thread and self.scan_thread.is_alive():
            self.scan_thread.join(timeout=5)
        if self.capture is not None:
            self.capture.release()
            self.capture = None
        self.logger.info("Camera stopped")
