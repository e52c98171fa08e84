# scan_submit/ui/button_prompt.py
"""Operator prompts driven by the confirm and cancel buttons."""
import logging

from scan_submit.config.settings import PromptConfig
from scan_submit.hardware.hardware_controller import LEDStatus


class ButtonPrompt:
    """
    Shows prompts in the log and waits for a button press.

    The station has no screen: the message goes to the console and the LED,
    confirm is the green button and cancel the red one. Any press closes an
    acknowledgment.
    """

    def __init__(self, hardware):
        self.logger = logging.getLogger(__name__)
        self.hardware = hardware
        self.busy = False

    def ask_confirmation(self, payload, on_confirm, on_cancel):
        self.logger.info(
            f"{PromptConfig.CONFIRM_TITLE} - Data: {payload} - "
            f"Press CONFIRM to send to the server or CANCEL to scan again"
        )
        self.hardware.set_button_callbacks(on_confirm=on_confirm, on_cancel=on_cancel)

    def acknowledge(self, title, message, on_ack, ok=True):
        self.hardware.set_status(LEDStatus.SUCCESS if ok else LEDStatus.ERROR)
        text = message.replace("\n", " ")
        if ok:
            self.logger.info(f"{title} - {text} - Press any button to continue")
        else:
            self.logger.error(f"{title} - {text} - Press any button to continue")
        self.hardware.set_button_callbacks(on_confirm=on_ack, on_cancel=on_ack)

    def show_busy(self):
        self.busy = True
        self.logger.info("Sending to server...")

    def hide_busy(self):
        self.busy = False
