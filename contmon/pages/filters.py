#!/usr/bin/env python3
"""
Template filters for the container pages
"""

import time


def format_datetime(timestamp):
    """Format timestamp as full datetime string."""
    if not timestamp:
        return ""
    try:
        return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(timestamp))
    except (TypeError, ValueError, OverflowError):
        return str(timestamp)


def format_bytes(bytes_value):
    """Format bytes value with appropriate unit."""
    if not bytes_value:
        return "0 B"
    try:
        bytes_val = float(bytes_value)
    except (TypeError, ValueError):
        return str(bytes_value)
    if bytes_val < 1024:
        return f"{bytes_val:.0f}B"
    elif bytes_val < 1024**2:
        return f"{bytes_val/1024:.1f}KB"
    elif bytes_val < 1024**3:
        return f"{bytes_val/(1024**2):.1f}MB"
    else:
        return f"{bytes_val/(1024**3):.1f}GB"


def format_uptime(start_time, now=None):
    """Format time since start_time as 'N days, M hours' style string."""
    if not start_time:
        return "Unknown"
    seconds = int((now or time.time()) - start_time)
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60
    if days > 0:
        return f"{days} days, {hours} hours"
    elif hours > 0:
        return f"{hours} hours, {minutes} minutes"
    else:
        return f"{minutes} minutes"


def format_percent(used, total):
    if not total:
        return "0.0%"
    return f"{100.0 * used / total:.1f}%"


def setup_template_filters(templates):
    """Setup all template filters in Jinja2 environment."""
    templates.env.filters['format_datetime'] = format_datetime
    templates.env.filters['format_bytes'] = format_bytes
    templates.env.filters['format_uptime'] = format_uptime
    templates.env.globals['format_percent'] = format_percent
