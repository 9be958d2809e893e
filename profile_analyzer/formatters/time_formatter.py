"""
Time formatting utilities for human-readable output.
"""


def format_time(us: float) -> str:
    """
    Format time in microseconds to a human-readable string.

    Args:
        us: Time in microseconds (the unit of V8 CPU profiles)

    Returns:
        Formatted time string (e.g., "850 us", "123.45 ms", "2.34 s", "1m 30.50s")
    """
    if us < 1000:
        return f"{us:.0f} us"
    ms = us / 1000
    if ms < 1000:
        return f"{ms:.2f} ms"
    elif ms < 60000:
        return f"{ms/1000:.2f} s"
    else:
        minutes = int(ms / 60000)
        seconds = (ms % 60000) / 1000
        return f"{minutes}m {seconds:.2f}s"
