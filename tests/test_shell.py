from shell import (ARROW_DOWN, ARROW_UP, CANCEL, CLEAR, CTRL_C, CTRL_D, CTRL_L, CTRL_S,
                   CTRL_W, CTRL_X, ENTER, EOF, SUBMIT, WELCOME, Editor, LineReader,
                   Session, run_tasks, split_keys)
from vfs import HOME


def make_session():
    return Session(color=False)


# -----------------------------------------------------------------------------
# Session
# -----------------------------------------------------------------------------

def test_prompt_abbreviates_home():
    session = make_session()
    assert session.prompt() == "user@ubuntu:~$ "
    session.run("cd Documents")
    assert session.prompt() == "user@ubuntu:~/Documents$ "
    session.run("cd /etc")
    assert session.prompt() == "user@ubuntu:/etc$ "


def test_session_starts_home_with_welcome():
    session = make_session()
    assert session.cwd == HOME
    assert session.output == [WELCOME]


def test_run_records_history_and_output():
    session = make_session()
    assert session.run("pwd") == HOME
    assert session.run("   ") == ""
    assert session.history == ["pwd"]
    assert session.output[-2:] == ["user@ubuntu:~$ pwd", HOME]


def test_cd_changes_session_directory():
    session = make_session()
    session.run("cd ..")
    assert session.cwd == "/home"
    session.run("cd")
    assert session.cwd == HOME


def test_nano_save_then_cat():
    session = make_session()
    session.run("nano a")
    assert session.editor is not None
    assert session.editor.filename == "a"
    assert session.save_editor("hi") == "File saved"
    session.close_editor()
    assert session.editor is None
    assert session.run("cat a") == "hi"


def test_save_after_file_removed_writes_nothing():
    session = make_session()
    session.run("nano gone.txt")
    session.fs.remove_child(HOME, "gone.txt")
    assert session.save_editor("data") == ""
    assert session.fs.get_node(HOME + "/gone.txt") is None


def test_save_without_editor_is_noop():
    assert make_session().save_editor("x") == ""


def test_clear_empties_scrollback():
    session = make_session()
    session.run("ls")
    session.run("clear")
    assert session.output == []
    assert session.pending_clear


def test_history_navigation():
    session = make_session()
    assert session.history_prev() is None
    for line in ("ls", "pwd", "tree"):
        session.run(line)

    assert session.history_next() is None
    assert session.history_prev() == "tree"
    assert session.history_prev() == "pwd"
    assert session.history_prev() == "ls"
    assert session.history_prev() == "ls"
    assert session.history_next() == "pwd"
    assert session.history_next() == "tree"
    assert session.history_next() == ""
    assert session.history_index == -1


def test_sessions_do_not_share_filesystems():
    a, b = make_session(), make_session()
    a.run("mkdir only-a")
    assert "only-a/" in a.run("ls")
    assert "only-a/" not in b.run("ls")


# -----------------------------------------------------------------------------
# Key handling
# -----------------------------------------------------------------------------

def test_split_keys():
    assert split_keys("ab\r\n") == ["a", "b", ENTER]
    assert split_keys("x\n") == ["x", ENTER]
    assert split_keys("\x1b[A\x1b[B") == [ARROW_UP, ARROW_DOWN]
    assert split_keys("\x1bOA") == [ARROW_UP]


def test_line_reader_submits_line():
    reader = LineReader(make_session())
    echoes = [reader.feed(k).echo for k in "lx"]
    assert echoes == ["l", "x"]
    assert reader.feed("\x7f").echo == "\b \b"
    reader.feed("s")
    result = reader.feed(ENTER)
    assert result.event == SUBMIT
    assert result.line == "ls"
    assert reader.line == ""


def test_line_reader_control_keys():
    reader = LineReader(make_session())
    reader.feed("a")
    assert reader.feed(CTRL_D).event is None
    assert reader.feed(CTRL_C).event == CANCEL
    assert reader.line == ""
    assert reader.feed(CTRL_L).event == CLEAR
    assert reader.feed(CTRL_D).event == EOF
    assert reader.feed("\t").echo == ""


def test_line_reader_history_keys():
    session = make_session()
    session.run("pwd")
    reader = LineReader(session)
    result = reader.feed(ARROW_UP)
    assert result.echo.endswith("user@ubuntu:~$ pwd")
    assert reader.line == "pwd"
    reader.feed(ARROW_DOWN)
    assert reader.line == ""


# -----------------------------------------------------------------------------
# Editor
# -----------------------------------------------------------------------------

def test_editor_typing_and_actions():
    editor = Editor("a.txt", "x")
    assert editor.feed("y") == (None, "y")
    assert editor.feed(ENTER) == (None, "\r\n")
    assert editor.feed("z") == (None, "z")
    assert editor.buffer == "xy\nz"
    assert editor.feed("\x7f") == (None, "\b \b")
    assert editor.feed("\x7f") == (Editor.REDRAW, "")
    assert editor.buffer == "xy"
    assert editor.feed(CTRL_S)[0] == Editor.SAVE
    assert editor.feed(CTRL_X)[0] == Editor.CLOSE
    assert editor.feed(CTRL_W)[0] == Editor.HELP
    assert editor.feed(ARROW_UP) == (None, "")


def test_editor_screen_shows_name_and_content():
    screen = Editor("notes.txt", "one\ntwo").screen(color=False)
    assert "GNU nano - notes.txt" in screen
    assert screen.endswith("one\r\ntwo")


# -----------------------------------------------------------------------------
# Task queue
# -----------------------------------------------------------------------------

def test_run_tasks_feeds_lines_in_order():
    session = make_session()
    chunks = list(run_tasks(session, ["mkdir x", "", "cd x", "pwd"]))
    assert chunks == [
        "[Task 1/3] user@ubuntu:~$ mkdir x",
        "[Task 2/3] user@ubuntu:~$ cd x",
        "[Task 3/3] user@ubuntu:~/x$ pwd",
        "/home/user/x",
        "All tasks completed successfully!",
    ]
    assert session.cwd == "/home/user/x"


def test_run_tasks_with_nothing_to_do():
    assert list(run_tasks(make_session(), ["", "  "])) == []


def test_save_writes_dot_dot_child_not_parent():
    session = make_session()
    session.run("nano ..")
    assert session.save_editor("x") == "File saved"
    assert session.fs.get_directory(HOME).children[".."].content == "x"
    assert session.fs.get_node("/home").kind == "directory"


def test_split_keys_reads_csi_through_final_byte():
    assert split_keys("\x1b[3~") == ["\x1b[3~"]
    assert split_keys("\x1b[1;5Ca") == ["\x1b[1;5C", "a"]


def test_line_reader_ignores_delete_key():
    reader = LineReader(make_session())
    for key in split_keys("ls\x1b[3~"):
        reader.feed(key)
    assert reader.line == "ls"
