from .exceptions import InputWriteError, ProcessOutputError, ProcessStartError
from .monitor import ProcessMonitor
from .output import CollectingOutput, ConsoleOutput, StreamingOutput
from .result import ProcessResult
from .sinks import StreamingProcessOwner
from .spawner import ProcessSpec

__all__ = [
    "CollectingOutput",
    "ConsoleOutput",
    "InputWriteError",
    "ProcessMonitor",
    "ProcessOutputError",
    "ProcessResult",
    "ProcessSpec",
    "ProcessStartError",
    "StreamingOutput",
    "StreamingProcessOwner",
]
