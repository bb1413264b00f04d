"""
Time formatting utilities for human-readable output.
"""


def format_time(us: float) -> str:
    """
    Format time in microseconds to a human-readable string.

    Args:
        us: Time in microseconds

    Returns:
        Formatted time string (e.g., "450 us", "123 ms", "2.34 s", "1m 30.50s")
    """
    if us < 1000:
        return f"{us:.0f} us"
    elif us < 1_000_000:
        return f"{us/1000:.0f} ms"
    elif us < 60_000_000:
        return f"{us/1_000_000:.2f} s"
    else:
        minutes = int(us / 60_000_000)
        seconds = (us % 60_000_000) / 1_000_000
        return f"{minutes}m {seconds:.2f}s"


def truncate_name(name: str, max_length: int) -> str:
    """Shorten a name to max_length characters, ending in '...' when cut."""
    if max_length <= 0 or len(name) <= max_length:
        return name
    if max_length <= 3:
        return name[:max_length]
    return name[:max_length - 3] + '...'
