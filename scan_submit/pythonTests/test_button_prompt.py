# pythonTests/test_button_prompt.py
from unittest.mock import MagicMock

import pytest

from scan_submit.hardware.hardware_controller import LEDStatus
from scan_submit.ui.button_prompt import ButtonPrompt


class FakeHardware:
    def __init__(self):
        self.on_confirm = None
        self.on_cancel = None
        self.statuses = []

    def set_button_callbacks(self, on_confirm=None, on_cancel=None):
        self.on_confirm = on_confirm
        self.on_cancel = on_cancel

    def press(self, confirm=True):
        callback = self.on_confirm if confirm else self.on_cancel
        if callback:
            self.on_confirm = self.on_cancel = None
            callback()

    def set_status(self, status):
        self.statuses.append(status)


@pytest.fixture
def hardware():
    return FakeHardware()


@pytest.fixture
def prompt(hardware):
    return ButtonPrompt(hardware)


def test_confirmation_arms_both_buttons(prompt, hardware):
    on_confirm, on_cancel = MagicMock(), MagicMock()

    prompt.ask_confirmation("ABC123", on_confirm, on_cancel)

    assert hardware.on_confirm is on_confirm
    assert hardware.on_cancel is on_cancel


def test_only_first_press_is_delivered(prompt, hardware):
    on_confirm, on_cancel = MagicMock(), MagicMock()

    prompt.ask_confirmation("ABC123", on_confirm, on_cancel)
    hardware.press(confirm=False)
    hardware.press(confirm=True)

    on_cancel.assert_called_once()
    on_confirm.assert_not_called()


@pytest.mark.parametrize("ok, led", [(True, LEDStatus.SUCCESS), (False, LEDStatus.ERROR)])
def test_acknowledge_sets_led_and_any_button_closes(prompt, hardware, ok, led):
    on_ack = MagicMock()

    prompt.acknowledge("Title", "line one\nline two", on_ack, ok=ok)
    hardware.press(confirm=False)

    assert hardware.statuses == [led]
    on_ack.assert_called_once()


def test_busy_flag(prompt):
    prompt.show_busy()
    assert prompt.busy

    prompt.hide_busy()
    assert not prompt.busy
