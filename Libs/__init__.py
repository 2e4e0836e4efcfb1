# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .DriftDetector import (
    POLL_INTERVAL,
    SEEK_THRESHOLD,
    PLAY_PAUSE_COOLDOWN,
    SEEK_COOLDOWN,
    PlayerState,
    EchoGuard,
    DriftDetector,
    PlayerSync,
)
