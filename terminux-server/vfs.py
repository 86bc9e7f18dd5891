# vfs.py
import logging
from dataclasses import dataclass, field

from errors import AlreadyExists, InvalidName, IsADirectory, NotADirectory, NotFound

logger = logging.getLogger(__name__)

HOME = "/home/user"

DIRECTORY = "directory"
FILE = "file"

WELCOME_TXT = (
    "Welcome to your Ubuntu Terminal!\n\n"
    "Available commands:\n"
    "- help : Show help\n"
    "- ls : List files\n"
    "- cd : Change directory\n"
    "- nano : Open text editor\n"
    "- clear : Clear screen\n\n"
    "Happy exploring!"
)

README_MD = (
    "# Terminal Simulator\n\n"
    "## Features\n\n"
    "- Complete file system\n"
    "- Integrated text editor\n"
    "- Command history\n"
    "- Authentic Ubuntu interface\n\n"
    "## Shortcuts\n\n"
    "- Up/Down : Navigate history\n"
    "- Ctrl+L : Clear screen\n"
    "- Ctrl+C : Cancel current command"
)


@dataclass
class Directory:
    children: dict = field(default_factory=dict)
    kind = DIRECTORY


@dataclass
class File:
    content: str = ""
    kind = FILE


def resolve_path(path, current_path):
    if path.startswith("/"):
        return path
    if path == "..":
        parts = [p for p in current_path.split("/") if p]
        if parts:
            parts.pop()
        return "/" + "/".join(parts)
    if path == ".":
        return current_path
    if current_path == "/":
        return f"/{path}"
    return f"{current_path}/{path}"


def child_path(dir_path, name):
    # joins literally; "." and ".." stay plain names
    return dir_path.rstrip("/") + "/" + name


def _check_name(name):
    if not name or "/" in name:
        raise InvalidName(name)


class VirtualFS:
    """In-memory tree rooted at ``/``, seeded with a small home directory.

    Lookups return ``None`` for missing paths. Mutations go through
    ``create_child``, ``remove_child`` and ``set_file_content``, which raise
    ``errors.ShellError`` subclasses when an invariant would break.
    """

    resolve_path = staticmethod(resolve_path)

    def __init__(self):
        self.root = Directory({
            "home": Directory({
                "user": Directory({
                    "Documents": Directory(),
                    "Desktop": Directory(),
                    "Downloads": Directory(),
                    "welcome.txt": File(WELCOME_TXT),
                    "readme.md": File(README_MD),
                }),
            }),
            "etc": Directory(),
            "usr": Directory(),
            "var": Directory(),
        })

    def get_node(self, path):
        current = self.root
        for part in path.split("/"):
            if not part:
                continue
            if current.kind != DIRECTORY or part not in current.children:
                return None
            current = current.children[part]
        return current

    def get_directory(self, path):
        node = self.get_node(path)
        if node is None:
            raise NotFound(path)
        if node.kind != DIRECTORY:
            raise NotADirectory(path)
        return node

    def list_dir(self, path):
        return list(self.get_directory(path).children.items())

    def read_file(self, path):
        node = self.get_node(path)
        if node is None:
            raise NotFound(path)
        if node.kind != FILE:
            raise IsADirectory(path)
        return node.content or ""

    def create_child(self, dir_path, name, kind):
        _check_name(name)
        parent = self.get_directory(dir_path)
        if name in parent.children:
            raise AlreadyExists(name)
        node = Directory() if kind == DIRECTORY else File()
        parent.children[name] = node
        logger.debug("created %s %s in %s", kind, name, dir_path)
        return node

    def remove_child(self, dir_path, name):
        _check_name(name)
        parent = self.get_directory(dir_path)
        if name not in parent.children:
            raise NotFound(f"'{name}'")
        node = parent.children.pop(name)
        if node.kind == DIRECTORY and node.children:
            logger.warning("removed non-empty directory %s from %s", name, dir_path)
        return node

    def set_file_content(self, path, content):
        node = self.get_node(path)
        if node is None:
            raise NotFound(path)
        if node.kind != FILE:
            raise IsADirectory(path)
        node.content = content
