# pythonTests/test_camera_source.py
from unittest.mock import MagicMock, patch

import pytest

pytest.importorskip("cv2")
pytest.importorskip("pyzbar.pyzbar")

from scan_submit.core.camera_source import CameraSource


def symbol(data):
    found = MagicMock()
    found.data = data
    return found


@pytest.fixture
def decoded():
    with patch("scan_submit.core.camera_source.decode") as decode:
        yield decode


def test_scan_once_emits_every_payload(decoded):
    decoded.return_value = [symbol(b"ABC123"), symbol(b"XYZ")]
    on_decode = MagicMock()
    camera = CameraSource(on_decode)

    assert camera.scan_once(frame=object()) == 2

    assert [c.args[0] for c in on_decode.call_args_list] == ["ABC123", "XYZ"]


def test_disabled_camera_emits_nothing(decoded):
    decoded.return_value = [symbol(b"ABC123")]
    on_decode = MagicMock()
    camera = CameraSource(on_decode)

    camera.set_scanning_enabled(False)
    assert camera.scan_once(frame=object()) == 0
    on_decode.assert_not_called()
    decoded.assert_not_called()

    camera.set_scanning_enabled(True)
    camera.scan_once(frame=object())
    on_decode.assert_called_once_with("ABC123")


def test_non_utf8_payload_is_skipped(decoded):
    decoded.return_value = [symbol(b"\xff\xfe"), symbol(b"OK")]
    camera = CameraSource(MagicMock())

    assert camera.decode_frame(object()) == ["OK"]


def test_open_capture_configures_device():
    capture = MagicMock()
    capture.isOpened.return_value = True
    with patch("scan_submit.core.camera_source.cv2.VideoCapture", return_value=capture) as video:
        camera = CameraSource(MagicMock(), device_index=2)
        assert camera._open_capture() is capture

    video.assert_called_once_with(2)
    assert capture.set.call_count == 2
