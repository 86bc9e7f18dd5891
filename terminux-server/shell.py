# shell.py
import logging
import time
from collections import namedtuple

from commands import Effects, execute_command
from markup import Colors, paint
from vfs import FILE, HOME, VirtualFS, child_path

logger = logging.getLogger(__name__)

WELCOME = "Welcome to Terminux! Type 'help' to see the available commands."

CTRL_C = "\x03"
CTRL_D = "\x04"
CTRL_L = "\x0c"
CTRL_S = "\x13"
CTRL_W = "\x17"
CTRL_X = "\x18"
TAB = "\t"
BACKSPACES = ("\x7f", "\x08")
ENTER = "\r"
ARROW_UP = "\x1b[A"
ARROW_DOWN = "\x1b[B"

CLEAR_SCREEN = "\x1b[2J\x1b[H"
ERASE_LINE = "\r\x1b[K"


def split_keys(data):
    """Break raw terminal input into keys, one escape sequence per key."""
    keys = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x1b" and data[i + 1:i + 2] == "O" and i + 2 < len(data):
            keys.append("\x1b[" + data[i + 2])
            i += 3
            continue
        if ch == "\x1b" and data[i + 1:i + 2] == "[":
            # CSI: parameter bytes up to a final byte in @..~
            end = i + 2
            while end < len(data) and not "@" <= data[end] <= "~":
                end += 1
            keys.append(data[i:end + 1])
            i = end + 1
            continue
        if ch == "\r" and data[i + 1:i + 2] == "\n":
            i += 1
        elif ch == "\n":
            ch = ENTER
        keys.append(ch)
        i += 1
    return keys


# ------------------------------------------------
# nano-style editor buffer
# ------------------------------------------------
class Editor:
    SAVE = "save"
    CLOSE = "close"
    HELP = "help"
    REDRAW = "redraw"

    def __init__(self, filename, content=""):
        self.filename = filename
        self.buffer = content

    def feed(self, key):
        """Apply one key. Returns ``(action, echo)``."""
        if key == CTRL_S:
            return self.SAVE, ""
        if key == CTRL_X:
            return self.CLOSE, ""
        if key == CTRL_W:
            return self.HELP, ""
        if key in BACKSPACES:
            if not self.buffer:
                return None, ""
            removed, self.buffer = self.buffer[-1], self.buffer[:-1]
            if removed == "\n":
                return self.REDRAW, ""
            return None, "\b \b"
        if key == ENTER:
            self.buffer += "\n"
            return None, "\r\n"
        if len(key) == 1 and (key.isprintable() or key == TAB):
            self.buffer += key
            return None, key
        return None, ""

    def screen(self, color=True):
        header = paint(f"  GNU nano - {self.filename}", Colors.GRAY, color)
        hints = paint("^S Save | ^X Exit | ^W Help", Colors.GRAY, color)
        return CLEAR_SCREEN + header + "\r\n" + hints + "\r\n\r\n" + self.buffer.replace("\n", "\r\n")


EDITOR_HELP = (
    "Editor shortcuts:\n"
    "  Ctrl+S - Save file\n"
    "  Ctrl+X - Exit editor\n"
    "  Ctrl+W - Show this help"
)


# ------------------------------------------------
# Session state
# ------------------------------------------------
class Session:
    """One user's terminal: current directory, history, scrollback and editor."""

    def __init__(self, fs=None, color=True, rng=None):
        self.fs = fs or VirtualFS()
        self.cwd = HOME
        self.color = color
        self.rng = rng
        self.history = []
        self.history_index = -1
        self.output = [WELCOME]
        self.editor = None
        self.pending_clear = False
        self.effects = Effects(
            set_current_path=self._set_current_path,
            open_editor=self._open_editor,
            clear_output=self._clear_output,
        )

    def _set_current_path(self, path):
        self.cwd = path

    def _open_editor(self, filename, content):
        self.editor = Editor(filename, content)

    def _clear_output(self):
        self.output = []
        self.pending_clear = True

    def prompt(self):
        path = self.cwd
        if path == HOME or path.startswith(HOME + "/"):
            path = "~" + path[len(HOME):]
        return paint(f"user@ubuntu:{path}$ ", Colors.GREEN, self.color)

    def run(self, line):
        if not line.strip():
            return ""

        self.history.append(line)
        self.history_index = -1
        self.output.append(self.prompt() + line)

        result = execute_command(line, self.cwd, self.fs, self.effects, self.color, self.rng)
        if result.strip():
            self.output.append(result)
        return result

    def save_editor(self, content=None):
        if self.editor is None:
            return ""
        if content is not None:
            self.editor.buffer = content

        path = child_path(self.cwd, self.editor.filename)
        node = self.fs.get_node(path)
        if node is None or node.kind != FILE:
            logger.info("not saving %s: file no longer exists", path)
            return ""

        self.fs.set_file_content(path, self.editor.buffer)
        message = paint("File saved", Colors.GREEN, self.color)
        self.output.append(message)
        return message

    def close_editor(self):
        self.editor = None

    def history_prev(self):
        if not self.history:
            return None
        if self.history_index == -1:
            self.history_index = len(self.history) - 1
        else:
            self.history_index = max(0, self.history_index - 1)
        return self.history[self.history_index]

    def history_next(self):
        if self.history_index == -1:
            return None
        self.history_index += 1
        if self.history_index >= len(self.history):
            self.history_index = -1
            return ""
        return self.history[self.history_index]


# ------------------------------------------------
# Line editing for the prompt
# ------------------------------------------------
KeyResult = namedtuple("KeyResult", ["echo", "event", "line"])

SUBMIT = "submit"
CANCEL = "cancel"
CLEAR = "clear"
EOF = "eof"


class LineReader:
    def __init__(self, session):
        self.session = session
        self.line = ""

    def _replace_line(self, text):
        self.line = text
        return ERASE_LINE + self.session.prompt() + text

    def feed(self, key):
        if key == ENTER:
            line, self.line = self.line, ""
            return KeyResult("\r\n", SUBMIT, line)
        if key == CTRL_C:
            self.line = ""
            return KeyResult("^C\r\n", CANCEL, None)
        if key == CTRL_L:
            return KeyResult("", CLEAR, None)
        if key == CTRL_D and not self.line:
            return KeyResult("\r\n", EOF, None)
        if key in BACKSPACES:
            if not self.line:
                return KeyResult("", None, None)
            self.line = self.line[:-1]
            return KeyResult("\b \b", None, None)
        if key == ARROW_UP:
            entry = self.session.history_prev()
            return KeyResult("" if entry is None else self._replace_line(entry), None, None)
        if key == ARROW_DOWN:
            entry = self.session.history_next()
            return KeyResult("" if entry is None else self._replace_line(entry), None, None)
        if key == TAB:
            return KeyResult("", None, None)
        if len(key) == 1 and key.isprintable():
            self.line += key
            return KeyResult(key, None, None)
        return KeyResult("", None, None)


# ------------------------------------------------
# Task queue: feed several lines one turn at a time
# ------------------------------------------------
def run_tasks(session, lines, delay=0.0):
    lines = [line for line in lines if line.strip()]
    total = len(lines)
    for i, line in enumerate(lines, start=1):
        if delay > 0:
            time.sleep(delay)

        label = paint(f"[Task {i}/{total}]", Colors.CYAN, session.color)
        yield f"{label} {session.prompt()}{line}"

        result = session.run(line)
        if result.strip():
            yield result

    if total:
        yield paint("All tasks completed successfully!", Colors.GREEN, session.color)
