"""Host editor adapters."""

from bufrouter.host.base import Host, SignalHandle
from bufrouter.host.memory import HostError, MemoryHost, MemoryView, MemoryWindow
from bufrouter.host.vim import VimChannel, VimHost

__all__ = [
    "Host",
    "SignalHandle",
    "MemoryHost",
    "MemoryView",
    "MemoryWindow",
    "HostError",
    "VimChannel",
    "VimHost",
]
