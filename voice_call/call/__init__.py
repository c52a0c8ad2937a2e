"""
Call module: the turn-taking state machine and the call session around it.

Key components:
- events: Events submitted to the turn coordinator by browser handlers,
  retry timers and backend exchanges.
- coordinator: TurnCoordinator, the state machine sequencing
  listening -> thinking -> speaking -> listening.
- session: SessionController, which starts and ends calls, owns the
  recording and delivers the transcript, summary and audio afterwards.

Usage examples:
```python
from voice_call.call import SessionController

controller = SessionController(channel, backend)
controller.coordinator.start()
await controller.start_session()
...
report = await controller.end_session()
```
"""

from voice_call.call.coordinator import TurnCoordinator, is_termination_phrase
from voice_call.call.events import (
    CallEvent,
    ExchangeFailed,
    ExchangeSucceeded,
    GreetingReceived,
    ListenRequested,
    RecognitionEnded,
    RecognitionFailed,
    SynthesisFailed,
    SynthesisFinished,
    UtteranceRecognized,
)
from voice_call.call.session import CallReport, SessionController

__all__ = [
    "CallEvent",
    "CallReport",
    "ExchangeFailed",
    "ExchangeSucceeded",
    "GreetingReceived",
    "ListenRequested",
    "RecognitionEnded",
    "RecognitionFailed",
    "SessionController",
    "SynthesisFailed",
    "SynthesisFinished",
    "TurnCoordinator",
    "UtteranceRecognized",
    "is_termination_phrase",
]
