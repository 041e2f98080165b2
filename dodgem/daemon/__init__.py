"""Running Dodgem as a long-lived service."""

from dodgem.daemon.service import DodgemDaemon, run_daemon

__all__ = [
    "DodgemDaemon",
    "run_daemon",
]
