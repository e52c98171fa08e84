# scan_submit/core/scan_controller.py
"""Scan-confirm-submit state machine."""
import logging
import threading
from typing import Callable, Optional

from scan_submit.config.settings import NetworkConfig, PromptConfig
from scan_submit.core.session import ScanSession, ScanStatus, SubmissionResult


class SingleShot:
    """Callback group where only the first call of any member goes through."""

    def __init__(self):
        self._fired = False
        self._lock = threading.Lock()

    def wrap(self, callback: Callable[[], None]) -> Callable[[], None]:
        def _once(*_args):
            with self._lock:
                if self._fired:
                    return
                self._fired = True
            callback()
        return _once


class ScanSubmitController:
    """
    Owns the scan lifecycle for one station.

    Every public handler must run on the dispatcher thread. Collaborators:
      camera     - set_scanning_enabled(bool)
      prompt     - ask_confirmation(payload, on_confirm, on_cancel),
                   acknowledge(title, message, on_ack, ok),
                   show_busy(), hide_busy()
      submitter  - submit(payload, on_result)
      haptics    - pulse()
      dispatcher - bind(handler) -> callable that posts handler
    """

    def __init__(self, camera, prompt, submitter, dispatcher, haptics=None,
                 on_status_change: Optional[Callable[[ScanStatus], None]] = None):
        self.logger = logging.getLogger(__name__)
        self.camera = camera
        self.prompt = prompt
        self.submitter = submitter
        self.dispatcher = dispatcher
        self.haptics = haptics
        self.on_status_change = on_status_change

        self._session: Optional[ScanSession] = None
        self._in_flight = False

    @property
    def status(self) -> ScanStatus:
        return self._session.status if self._session else ScanStatus.IDLE

    @property
    def payload(self) -> Optional[str]:
        return self._session.payload if self._session else None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _set_session(self, session: Optional[ScanSession]) -> None:
        self._session = session
        if self.on_status_change:
            try:
                self.on_status_change(self.status)
            except Exception as e:
                self.logger.error(f"Error reporting status change: {e}")

    def on_decode(self, payload: str) -> None:
        """Accept the first decode while idle; drop everything else."""
        if self._session is not None or self._in_flight:
            self.logger.debug(f"Ignoring duplicate decode: {payload}")
            return

        # Guard and session are set in this call, before any hand-off
        self._in_flight = True
        self._set_session(ScanSession(payload))
        self.camera.set_scanning_enabled(False)
        self.logger.info(f"Detected QR code: {payload}")

        if self.haptics:
            try:
                self.haptics.pulse()
            except Exception as e:
                self.logger.error(f"Error triggering haptic pulse: {e}")

        shot = SingleShot()
        try:
            self.prompt.ask_confirmation(
                payload,
                shot.wrap(self.dispatcher.bind(self.on_confirm)),
                shot.wrap(self.dispatcher.bind(self.on_cancel)),
            )
        except Exception as e:
            self.logger.error(f"Error showing confirmation prompt: {e}")
            self._reset()

    def on_cancel(self) -> None:
        """Discard the pending session and go back to scanning."""
        if self.status is not ScanStatus.AWAITING_CONFIRMATION:
            return
        self.logger.info("Submission cancelled by operator")
        self._reset()

    def on_confirm(self) -> None:
        """Submit the captured payload exactly once."""
        if self.status is not ScanStatus.AWAITING_CONFIRMATION:
            return
        payload = self._session.payload
        self._set_session(self._session.advance(ScanStatus.SUBMITTING))
        try:
            self.prompt.show_busy()
        except Exception as e:
            self.logger.error(f"Error showing busy indicator: {e}")

        try:
            self.submitter.submit(payload, self.dispatcher.bind(self._on_submission_done))
        except Exception as e:
            self.logger.error(f"Error starting submission: {e}")
            self._on_submission_done(SubmissionResult.failure(str(e)))

    def _on_submission_done(self, result: SubmissionResult) -> None:
        if self.status is not ScanStatus.SUBMITTING:
            self.logger.warning("Submission result arrived with no submission pending")
            return

        try:
            self._set_session(self._session.advance(ScanStatus.RESOLVED))
            shot = SingleShot()
            on_ack = shot.wrap(self.dispatcher.bind(self.on_acknowledge))
            if result.ok:
                label = result.label or NetworkConfig.DEFAULT_LABEL
                self.prompt.acknowledge(PromptConfig.SUCCESS_TITLE,
                                        f"Saved!\n({label})", on_ack, ok=True)
            else:
                self.logger.error(f"Submission failed: {result.reason}")
                self.prompt.acknowledge(PromptConfig.FAILURE_TITLE,
                                        PromptConfig.FAILURE_MESSAGE, on_ack, ok=False)
        except Exception as e:
            self.logger.error(f"Error showing submission result: {e}")
            self._reset()
        finally:
            self.prompt.hide_busy()

    def on_acknowledge(self) -> None:
        """Close the result prompt and resume scanning."""
        if self.status is not ScanStatus.RESOLVED:
            return
        self._reset()

    def _reset(self) -> None:
        self._set_session(None)
        self._in_flight = False
        self.camera.set_scanning_enabled(True)
