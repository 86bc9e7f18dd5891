# markup.py
import re

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    GRAY = "\033[37m"


def paint(text, color, enabled=True):
    if not enabled or not text:
        return text
    return f"{color}{text}{Colors.RESET}"


def strip_markup(text):
    return ANSI_RE.sub("", text)
