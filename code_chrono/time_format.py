"""Display helpers for timer and statistics values."""


def format_time(total_seconds: int) -> str:
    """Format seconds as ``mm:ss`` (minutes are not wrapped at 60)."""
    total = max(0, int(total_seconds))
    m, s = divmod(total, 60)
    return f"{m:02d}:{s:02d}"


def format_duration(total_seconds: int) -> str:
    """Format seconds as ``Xh Ym`` or ``Ym``."""
    total = max(0, int(total_seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"
