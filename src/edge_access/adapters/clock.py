import time


def system_clock_ms() -> int:
    """Wall-clock time in integer milliseconds since the epoch."""
    return int(time.time() * 1000)
