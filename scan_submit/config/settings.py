# scan_submit/config/settings.py
"""Configuration settings for the scan-submit station."""
import os
from dataclasses import dataclass


def _build_server_url():
    override = os.getenv("SCAN_SUBMIT_SERVER_URL")
    if override:
        return override
    host = os.getenv("SCAN_SUBMIT_SERVER_HOST", "192.168.50.98")
    port = os.getenv("SCAN_SUBMIT_SERVER_PORT", "5000")
    path = os.getenv("SCAN_SUBMIT_SERVER_PATH", "/api/save-qr")
    if not path.startswith("/"):
        path = "/" + path
    return f"http://{host}:{port}{path}"


@dataclass
class CameraConfig:
    DEVICE_INDEX = int(os.getenv("SCAN_SUBMIT_CAMERA_INDEX", "0"))
    FRAME_WIDTH = 640
    FRAME_HEIGHT = 480
    SCAN_INTERVAL = 0.05
    OPEN_MAX_TRIES = 5
    OPEN_MAX_TIME = 30

@dataclass
class NetworkConfig:
    SERVER_URL = _build_server_url()
    CONNECTION_TIMEOUT = float(os.getenv("SCAN_SUBMIT_TIMEOUT", "10.0"))
    QUEUE_TIMEOUT = 0.5
    MAX_QUEUE_SIZE = 16
    DEFAULT_LABEL = "item"

@dataclass
class PromptConfig:
    CONFIRM_TITLE = "QR code detected"
    SUCCESS_TITLE = "Success"
    FAILURE_TITLE = "Failed"
    FAILURE_MESSAGE = "Cannot reach the server.\nCheck the address and port."

@dataclass
class PathConfig:
    BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    LOG_DIR = os.getenv("SCAN_SUBMIT_LOG_DIR", os.path.join(BASE_DIR, 'logs'))

@dataclass
class HardwareConfig:
    RED_PIN = 17
    GREEN_PIN = 27
    BLUE_PIN = 22
    VIBRATION_PIN = 18
    TORCH_PIN = 23
    CONFIRM_BUTTON_PIN = 5
    CANCEL_BUTTON_PIN = 6
    TORCH_HOLD_TIME = 1.5
    PULSE_DURATION = 0.15
