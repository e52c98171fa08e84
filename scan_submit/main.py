"""Main entry point for the scan-submit station."""
import signal
import sys
import time
import logging

from scan_submit.config.settings import CameraConfig, NetworkConfig, PathConfig
from scan_submit.core.camera_source import CameraSource
from scan_submit.core.event_dispatcher import EventDispatcher
from scan_submit.core.scan_controller import ScanSubmitController
from scan_submit.hardware.hardware_controller import HardwareController, LEDStatus
from scan_submit.network.submission_client import SubmissionClient
from scan_submit.ui.button_prompt import ButtonPrompt
from scan_submit.utils.logging_config import setup_logging

class ScanSubmitStation:
    def __init__(self):
        """Initialize the scan-submit station."""
        self.logger = setup_logging()

        # Initialize components
        self.dispatcher = EventDispatcher(queue_timeout=NetworkConfig.QUEUE_TIMEOUT)
        self.hardware_controller = HardwareController()
        self.prompt = ButtonPrompt(self.hardware_controller)
        self.submission_client = SubmissionClient(
            NetworkConfig.SERVER_URL,
            connection_timeout=NetworkConfig.CONNECTION_TIMEOUT,
            max_queue_size=NetworkConfig.MAX_QUEUE_SIZE,
            queue_timeout=NetworkConfig.QUEUE_TIMEOUT,
            default_label=NetworkConfig.DEFAULT_LABEL
        )
        self.camera = CameraSource(
            on_decode=self._handle_decode,
            device_index=CameraConfig.DEVICE_INDEX,
            scan_interval=CameraConfig.SCAN_INTERVAL
        )
        self.controller = ScanSubmitController(
            camera=self.camera,
            prompt=self.prompt,
            submitter=self.submission_client,
            dispatcher=self.dispatcher,
            haptics=self.hardware_controller,
            on_status_change=self.hardware_controller.show_scan_status
        )
        self.running = False

    def _handle_decode(self, payload):
        """Forward a decode from the camera thread to the controller."""
        self.dispatcher.post(self.controller.on_decode, payload)

    def _handle_shutdown(self, signum, frame):
        """Handle shutdown signals."""
        self.logger.info("Shutdown signal received")
        self.stop()
        sys.exit(0)

    def start(self):
        """Start the station."""
        try:
            self.running = True
            self.dispatcher.start()
            self.submission_client.start()
            self.camera.start()

            # Set up signal handlers
            signal.signal(signal.SIGINT, self._handle_shutdown)
            signal.signal(signal.SIGTERM, self._handle_shutdown)

            self.hardware_controller.set_status(LEDStatus.SCANNING)
            self.logger.info(
                f"Station started - submitting to {self.submission_client.server_url}, "
                f"logging to {PathConfig.LOG_DIR}"
            )

        except Exception as e:
            self.logger.error(f"Error starting station: {e}")
            self.hardware_controller.set_status(LEDStatus.ERROR)
            raise

    def stop(self):
        """Stop the station."""
        if not self.running:
            return
        self.logger.info("Stopping station...")
        self.running = False

        self.camera.stop()
        self.submission_client.stop()
        self.dispatcher.stop()
        self.hardware_controller.cleanup()
        self.logger.info("Station stopped")

def main():
    """Main entry point for the application."""
    station = None
    try:
        station = ScanSubmitStation()
        station.start()

        # Keep the main thread running
        while True:
            time.sleep(1)

    except Exception as e:
        logging.error(f"Critical error: {e}")
        if station:
            station.hardware_controller.set_status(LEDStatus.ERROR)
        sys.exit(1)

if __name__ == "__main__":
    main()
