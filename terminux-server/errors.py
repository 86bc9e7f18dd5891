# errors.py


class ShellError(Exception):
    """Base for every error a command can report back to the terminal."""

    reason = "error"

    def __init__(self, subject=None, reason=None):
        self.subject = subject
        if reason is not None:
            self.reason = reason
        super().__init__(self.render())

    def render(self, command=None):
        parts = [p for p in (command, self.subject) if p]
        parts.append(self.reason)
        return ": ".join(parts)


class NotFound(ShellError):
    reason = "No such file or directory"


class NotADirectory(ShellError):
    reason = "Not a directory"


class IsADirectory(ShellError):
    reason = "Is a directory"


class AlreadyExists(ShellError):
    reason = "File exists"

    def __init__(self, name):
        super().__init__(f"'{name}'")


class MissingOperand(ShellError):
    reason = "missing operand"

    def __init__(self):
        super().__init__()


class InvalidName(ShellError):
    def __init__(self, name):
        super().__init__(reason=f"invalid name '{name}'")


class CommandNotFound(ShellError):
    reason = "command not found"

    def render(self, command=None):
        # bash reports unknown commands under its own name
        return f"bash: {self.subject}: {self.reason}"
