"""Shared fixtures: a fresh filesystem per test and an effects recorder."""

import pytest

from commands import Effects, execute_command
from vfs import HOME, VirtualFS


class EffectsRecorder:
    def __init__(self):
        self.calls = []
        self.effects = Effects(
            set_current_path=lambda path: self.calls.append(("cd", path)),
            open_editor=lambda name, content: self.calls.append(("editor", name, content)),
            clear_output=lambda: self.calls.append(("clear",)),
        )


@pytest.fixture
def fs():
    return VirtualFS()


@pytest.fixture
def recorder():
    return EffectsRecorder()


@pytest.fixture
def run(fs, recorder):
    """Execute a line uncolored against the fixture filesystem."""
    def _run(line, cwd=HOME):
        return execute_command(line, cwd, fs, recorder.effects, color=False)
    return _run
