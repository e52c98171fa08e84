# scan_submit/hardware/hardware_controller.py
from gpiozero import RGBLED, DigitalOutputDevice, LED, Button
import threading
import logging
from enum import Enum
from scan_submit.config.settings import HardwareConfig
from scan_submit.core.session import ScanStatus

class LEDStatus(Enum):
    """LED status indicators."""
    SCANNING = "scanning"        # Green - ready for a QR code
    AWAITING = "awaiting"        # Yellow - waiting for confirm/cancel
    SUBMITTING = "submitting"    # Blue - submission in progress
    SUCCESS = "success"          # Cyan - submission accepted, waiting for ack
    ERROR = "error"              # Red - submission failed, waiting for ack
    OFF = "off"                  # All off

_LED_COLORS = {
    LEDStatus.SCANNING: (0, 1, 0),
    LEDStatus.AWAITING: (1, 1, 0),
    LEDStatus.SUBMITTING: (0, 0, 1),
    LEDStatus.SUCCESS: (0, 1, 1),
    LEDStatus.ERROR: (1, 0, 0),
}

_SCAN_STATUS_LEDS = {
    ScanStatus.IDLE: LEDStatus.SCANNING,
    ScanStatus.AWAITING_CONFIRMATION: LEDStatus.AWAITING,
    ScanStatus.SUBMITTING: LEDStatus.SUBMITTING,
}

class HardwareController:
    """Controls the status LED, vibration motor, torch and operator buttons."""

    def __init__(self):
        """Initialize hardware controller."""
        self.logger = logging.getLogger(__name__)

        # Button handlers may fire as soon as they are attached
        self._current_status = LEDStatus.OFF
        self._led_lock = threading.Lock()
        self._vibration_lock = threading.Lock()
        self._vibration_timer = None
        self._button_lock = threading.Lock()
        self._cancel_was_held = False
        self._confirm_callback = None
        self._cancel_callback = None

        # Initialize RGB LED
        try:
            self.led = RGBLED(
                red=HardwareConfig.RED_PIN,
                green=HardwareConfig.GREEN_PIN,
                blue=HardwareConfig.BLUE_PIN
            )
            self.logger.info("RGB LED initialized successfully")
        except Exception as e:
            self.logger.error(f"Failed to initialize RGB LED: {e}")
            raise

        # Initialize vibration motor
        try:
            self.vibration = DigitalOutputDevice(
                HardwareConfig.VIBRATION_PIN,
                active_high=True,
                initial_value=False
            )
            self.torch = LED(HardwareConfig.TORCH_PIN)
            self.logger.info("Vibration motor and torch initialized successfully")
        except Exception as e:
            self.logger.error(f"Failed to initialize outputs: {e}")
            raise

        # Initialize operator buttons
        try:
            self.confirm_button = Button(HardwareConfig.CONFIRM_BUTTON_PIN)
            self.cancel_button = Button(
                HardwareConfig.CANCEL_BUTTON_PIN,
                hold_time=HardwareConfig.TORCH_HOLD_TIME
            )
            self.confirm_button.when_pressed = self._handle_confirm_pressed
            self.cancel_button.when_held = self._handle_cancel_held
            self.cancel_button.when_released = self._handle_cancel_released
            self.logger.info("Operator buttons initialized successfully")
        except Exception as e:
            self.logger.error(f"Failed to initialize buttons: {e}")
            raise

    def set_status(self, status: LEDStatus):
        """Set LED status indicator with solid colors."""
        try:
            with self._led_lock:
                if status == LEDStatus.OFF:
                    self.led.off()
                else:
                    self.led.color = _LED_COLORS[status]

                self._current_status = status
                self.logger.debug(f"LED status set to: {status.value}")

        except Exception as e:
            self.logger.error(f"Error setting LED status: {e}")

    def show_scan_status(self, status: ScanStatus):
        """Mirror controller state on the LED; RESOLVED is shown by the prompt."""
        led_status = _SCAN_STATUS_LEDS.get(status)
        if led_status is not None:
            self.set_status(led_status)

    def get_status(self) -> LEDStatus:
        """Get current LED status."""
        return self._current_status

    def set_button_callbacks(self, on_confirm=None, on_cancel=None):
        """
        Arm the buttons for one press; None leaves a button disarmed.

        The first press of either button disarms both before its callback
        runs, so a near-simultaneous press of the other button is dropped.
        """
        with self._button_lock:
            self._confirm_callback = on_confirm
            self._cancel_callback = on_cancel

    def _take_callback(self, confirm):
        with self._button_lock:
            callback = self._confirm_callback if confirm else self._cancel_callback
            if callback:
                self._confirm_callback = None
                self._cancel_callback = None
        return callback

    def _handle_confirm_pressed(self):
        callback = self._take_callback(confirm=True)
        if callback:
            callback()

    def _handle_cancel_held(self):
        self._cancel_was_held = True
        self.toggle_torch()

    def _handle_cancel_released(self):
        if self._cancel_was_held:
            # A long press toggled the torch; it is not a cancel
            self._cancel_was_held = False
            return
        callback = self._take_callback(confirm=False)
        if callback:
            callback()

    def toggle_torch(self):
        """Flip the torch on or off."""
        try:
            self.torch.toggle()
            self.logger.info(f"Torch {'on' if self.torch.is_lit else 'off'}")
        except Exception as e:
            self.logger.error(f"Error toggling torch: {e}")

    def _stop_vibration_timer(self):
        """Cancel any existing vibration timer."""
        if self._vibration_timer is not None:
            self._vibration_timer.cancel()
            self._vibration_timer = None

    def _delayed_vibration_stop(self):
        """Stop the motor and clear the timer."""
        try:
            self.vibration.off()
            self._vibration_timer = None
        except Exception as e:
            self.logger.error(f"Error stopping vibration: {e}")

    def pulse(self, duration=HardwareConfig.PULSE_DURATION):
        """
        Run the vibration motor briefly when a QR code is accepted.

        Args:
            duration (float): Length of the pulse in seconds.
        """
        try:
            with self._vibration_lock:
                self._stop_vibration_timer()
                self.vibration.on()
                self._vibration_timer = threading.Timer(duration, self._delayed_vibration_stop)
                self._vibration_timer.start()

            self.logger.debug("Played haptic pulse")

        except Exception as e:
            self.logger.error(f"Error playing haptic pulse: {e}")
            self.vibration.off()

    def cleanup(self):
        """Clean up hardware resources."""
        try:
            self.set_status(LEDStatus.OFF)

            if self._vibration_timer:
                self._vibration_timer.cancel()
            self.vibration.off()
            self.vibration.close()

            self.torch.off()
            self.torch.close()

            self.confirm_button.close()
            self.cancel_button.close()

            self.led.close()

            self.logger.info("Hardware resources cleaned up")

        except Exception as e:
            self.logger.error(f"Error cleaning up hardware resources: {e}")
