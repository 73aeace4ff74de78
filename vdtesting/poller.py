"""
Polling of a submitted test run until every execution completes.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Set

from .client import RemoteTestClient
from .exceptions import PollTimeoutError
from .schemas import ListStepsResponse

logger = logging.getLogger(__name__)

STATE_COMPLETE = "complete"
VALIDATING_MESSAGE = "- Validating"
DEFAULT_POLL_INTERVAL = 5.0


class PollState(Enum):
    RUNNING = "running"
    FINISHED = "finished"


@dataclass
class PollStatus:
    """Evaluation of a single poll response."""

    state: PollState
    message: str
    running: int
    total: int


def evaluate_steps(response: ListStepsResponse) -> PollStatus:
    """
    Decide whether the run has finished.

    The run is finished when at least one step exists and every step is
    complete. No steps means the service is still validating the submission.
    """
    total = len(response.steps)
    if total == 0:
        return PollStatus(PollState.RUNNING, VALIDATING_MESSAGE, 0, 0)

    running = sum(1 for step in response.steps if step.state != STATE_COMPLETE)
    state = PollState.FINISHED if running == 0 else PollState.RUNNING
    return PollStatus(state, f"- ({running}/{total}) running", running, total)


class PollLoop:
    """Polls the run until it finishes, printing each distinct status line once."""

    def __init__(
        self,
        client: RemoteTestClient,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = None,
        emit: Optional[Callable[[str], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.interval = interval
        self.timeout = timeout
        self.emit = emit or logger.info
        self.sleep = sleep
        self.clock = clock
        self.printed: Set[str] = set()

    def run(self) -> ListStepsResponse:
        """
        Poll until every step is complete.

        Returns:
            The final poll response

        Raises:
            TransportError, ProtocolError: If a poll request fails
            PollTimeoutError: If a timeout is set and exceeded
        """
        started = self.clock()
        while True:
            response = self.client.list_steps()
            status = evaluate_steps(response)
            self._emit_once(status.message)

            if status.state == PollState.FINISHED:
                return response

            if self.timeout is not None and self.clock() - started >= self.timeout:
                raise PollTimeoutError(
                    f"Test run did not finish within {self.timeout:g}s ({status.running}/{status.total} running)"
                )
            self.sleep(self.interval)

    def _emit_once(self, message: str) -> None:
        if message in self.printed:
            return
        self.printed.add(message)
        self.emit(message)
