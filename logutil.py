import os
import config

LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

_COLORS = {
    "WARN": "\x1b[33m",
    "ERROR": "\x1b[31m",
}

_frame_id = None


def set_frame(frame_id):
    global _frame_id
    _frame_id = frame_id


def _enabled(level):
    threshold = getattr(config, "LOG_LEVEL", "INFO")
    try:
        return LEVELS.index(level) >= LEVELS.index(threshold)
    except ValueError:
        # Unknown levels are always printed.
        return True


def format_line(scope, msg, level="INFO"):
    frame_tag = f" f{_frame_id}" if _frame_id is not None else ""
    return f"[{level}{frame_tag} {scope}] {msg}"


def log(scope, msg, level="INFO"):
    if scope == "FRAME" and not getattr(config, "LOG_MAIN_LOOP", True):
        return
    if not _enabled(level):
        return
    text = format_line(scope, msg, level)
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color and level in _COLORS:
        text = f"{_COLORS[level]}{text}\x1b[0m"
    print(text)
