# commands.py
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import fun
from errors import AlreadyExists, CommandNotFound, IsADirectory, MissingOperand, ShellError
from markup import Colors, paint
from vfs import DIRECTORY, FILE, HOME, child_path

logger = logging.getLogger(__name__)


class Command(Enum):
    HELP = "help"
    LS = "ls"
    CD = "cd"
    PWD = "pwd"
    MKDIR = "mkdir"
    TOUCH = "touch"
    RM = "rm"
    CAT = "cat"
    NANO = "nano"
    TREE = "tree"
    CLEAR = "clear"
    WHOAMI = "whoami"
    DATE = "date"
    ECHO = "echo"
    NEOFETCH = "neofetch"
    COWSAY = "cowsay"
    SL = "sl"
    MATRIX = "matrix"
    FORTUNE = "fortune"
    FIGLET = "figlet"
    JOKE = "joke"
    WEATHER = "weather"

    @classmethod
    def lookup(cls, name):
        try:
            return cls(name)
        except ValueError:
            raise CommandNotFound(name) from None


def _noop(*args):
    pass


@dataclass
class Effects:
    """Requests a command makes of whoever is driving the terminal."""

    set_current_path: Callable = _noop
    open_editor: Callable = _noop
    clear_output: Callable = _noop


class Context:
    def __init__(self, fs, current_path, effects, color, rng):
        self.fs = fs
        self.cwd = current_path
        self.effects = effects
        self.color = color
        self.rng = rng

    def resolve(self, path):
        return self.fs.resolve_path(path, self.cwd)


# ------------------------------------------------
# Tree rendering
# ------------------------------------------------
def render_tree(directory, lines, prefix="", color=True):
    entries = list(directory.children.items())
    for i, (name, node) in enumerate(entries):
        is_last = i == len(entries) - 1
        connector = "└── " if is_last else "├── "

        if node.kind == DIRECTORY:
            lines.append(prefix + connector + paint(name + "/", Colors.BLUE, color))
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_tree(node, lines, new_prefix, color)
        else:
            lines.append(prefix + connector + paint(name, Colors.GREEN, color))


# ------------------------------------------------
# Path-affecting handlers
# ------------------------------------------------
def _operand(args):
    name = args.strip()
    if not name:
        raise MissingOperand()
    return name


def _ls(args, ctx):
    target = ctx.resolve(args.strip() or ctx.cwd)
    items = []
    for name, node in ctx.fs.list_dir(target):
        if node.kind == DIRECTORY:
            items.append(paint(name + "/", Colors.BLUE, ctx.color))
        else:
            items.append(paint(name, Colors.GREEN, ctx.color))
    return "  ".join(items)


def _cd(args, ctx):
    if not args.strip():
        ctx.effects.set_current_path(HOME)
        return ""

    target = ctx.resolve(args.strip())
    ctx.fs.get_directory(target)
    ctx.effects.set_current_path(target)
    return ""


def _mkdir(args, ctx):
    ctx.fs.create_child(ctx.cwd, _operand(args), DIRECTORY)
    return ""


def _touch(args, ctx):
    try:
        ctx.fs.create_child(ctx.cwd, _operand(args), FILE)
    except AlreadyExists:
        # touching an existing node leaves it as is
        pass
    return ""


def _rm(args, ctx):
    ctx.fs.remove_child(ctx.cwd, _operand(args))
    return ""


def _cat(args, ctx):
    return ctx.fs.read_file(ctx.resolve(_operand(args)))


def _nano(args, ctx):
    filename = _operand(args)
    try:
        ctx.fs.create_child(ctx.cwd, filename, FILE)
    except AlreadyExists:
        pass

    node = ctx.fs.get_node(child_path(ctx.cwd, filename))
    if node.kind != FILE:
        raise IsADirectory(filename)

    ctx.effects.open_editor(filename, node.content or "")
    return ""


def _tree(args, ctx):
    lines = []
    render_tree(ctx.fs.get_directory(ctx.cwd), lines, color=ctx.color)
    return "\n".join(lines)


def _clear(args, ctx):
    ctx.effects.clear_output()
    return ""


# ------------------------------------------------
# Dispatch
# ------------------------------------------------
def _dispatch(command, args, ctx):
    if command is Command.LS:
        return _ls(args, ctx)
    elif command is Command.CD:
        return _cd(args, ctx)
    elif command is Command.PWD:
        return ctx.cwd
    elif command is Command.MKDIR:
        return _mkdir(args, ctx)
    elif command is Command.TOUCH:
        return _touch(args, ctx)
    elif command is Command.RM:
        return _rm(args, ctx)
    elif command is Command.CAT:
        return _cat(args, ctx)
    elif command is Command.NANO:
        return _nano(args, ctx)
    elif command is Command.TREE:
        return _tree(args, ctx)
    elif command is Command.CLEAR:
        return _clear(args, ctx)
    elif command is Command.HELP:
        return fun.help_text(ctx.color)
    elif command is Command.WHOAMI:
        return fun.whoami()
    elif command is Command.DATE:
        return fun.date()
    elif command is Command.ECHO:
        return fun.echo(args)
    elif command is Command.NEOFETCH:
        return fun.neofetch(ctx.color)
    elif command is Command.COWSAY:
        return fun.cowsay(args, ctx.color)
    elif command is Command.SL:
        return fun.sl(ctx.color)
    elif command is Command.MATRIX:
        return fun.matrix(ctx.rng, ctx.color)
    elif command is Command.FORTUNE:
        return fun.fortune(ctx.rng, ctx.color)
    elif command is Command.FIGLET:
        return fun.figlet(args, ctx.color)
    elif command is Command.JOKE:
        return fun.joke(ctx.rng, ctx.color)
    elif command is Command.WEATHER:
        return fun.weather(ctx.rng, ctx.color)
    raise AssertionError(f"unhandled command {command}")


def execute_command(line, current_path, fs, effects=None, color=True, rng=None):
    """Run one command line against ``fs`` and return its rendered output.

    Errors never escape: they come back as a red ``<cmd>: ...`` line. Side
    effects (cd, nano, clear) are requested through ``effects``.
    """
    command, _, args = line.strip().partition(" ")
    if not command:
        return ""

    ctx = Context(fs, current_path, effects or Effects(), color, rng or random.Random())
    try:
        return _dispatch(Command.lookup(command), args, ctx)
    except ShellError as e:
        logger.debug("%s failed: %s", command, e)
        return paint(e.render(command), Colors.RED, color)
