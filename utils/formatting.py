"""
顯示格式工具
"""


def format_bytes(num_bytes: int) -> str:
    """
    以二進位單位顯示大小

    Example:
        format_bytes(512)        -> '512 B'
        format_bytes(1536)       -> '1.5 KiB'
        format_bytes(5 * 2**30)  -> '5.0 GiB'
    """
    unit = 1024
    if num_bytes < unit:
        return f"{num_bytes} B"

    div, exp = unit, 0
    n = num_bytes // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit

    return f"{num_bytes / div:.1f} {'KMGTPE'[exp]}iB"


def format_duration(seconds: float) -> str:
    """
    顯示經過時間

    Example:
        format_duration(42)     -> '42s'
        format_duration(125)    -> ' 2m  5s'
        format_duration(90061)  -> '1d  1h  1m  1s'
    """
    total = int(seconds)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)

    if days > 0:
        return f"{days:,}d {hours:2d}h {minutes:2d}m {secs:2d}s"
    if hours > 0:
        return f"{hours:2d}h {minutes:2d}m {secs:2d}s"
    if minutes > 0:
        return f"{minutes:2d}m {secs:2d}s"
    return f"{secs}s"


def format_count(count: int) -> str:
    """千分位數字"""
    return f"{count:,}"
