# ssh_server.py
import codecs
import json
import logging
import os
import socket
import threading
import time
import uuid
from datetime import datetime

import paramiko

import settings
from markup import strip_markup
from shell import (CANCEL, CLEAR, CLEAR_SCREEN, EDITOR_HELP, EOF, SUBMIT, Editor,
                   LineReader, Session, split_keys)

logger = logging.getLogger(__name__)

LOG_LOCK = threading.Lock()

EXIT_COMMANDS = ("exit", "logout")
SCROLLBACK = 50


def crlf(text):
    return text.replace("\r\n", "\n").replace("\n", "\r\n")


# ------------------------------------------------
# Async JSON log writer
# ------------------------------------------------
def async_log(logfile, log_dict):
    def _write():
        line = json.dumps(log_dict) + "\n"
        with LOG_LOCK:
            with open(logfile, "a") as f:
                f.write(line)
    thread = threading.Thread(target=_write, daemon=True)
    thread.start()
    return thread


def load_host_key(path):
    if os.path.exists(path):
        return paramiko.RSAKey(filename=path)
    logger.info("Generating new host key at %s", path)
    key = paramiko.RSAKey.generate(2048)
    key.write_private_key_file(path)
    return key


# ------------------------------------------------
# SSH Session Handler
# ------------------------------------------------
class SSHServerHandler(paramiko.ServerInterface):
    def __init__(self, logfile=None, color=True):
        self.event = threading.Event()
        self.logfile = logfile
        self.session = Session(color=color)
        self.reader = LineReader(self.session)
        self.session_id = str(uuid.uuid4())[:8]
        self.username = "user"
        self.ip = None
        self.channel = None
        self._last_ts = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def get_allowed_auths(self, username):
        return "password"

    def check_auth_password(self, user, pwd):
        logger.info("[%s] login as %s", self.session_id, user)
        self.username = user
        return paramiko.AUTH_SUCCESSFUL

    def check_channel_request(self, kind, chanid):
        if kind == "session":
            return paramiko.OPEN_SUCCEEDED
        return paramiko.OPEN_FAILED_ADMINISTRATIVELY_PROHIBITED

    def check_channel_shell_request(self, channel):
        self.channel = channel
        self.event.set()
        return True

    def check_channel_pty_request(self, *a):
        return True

    # ------------------------------------------------
    # Transcript
    # ------------------------------------------------
    def record(self, cwd, cmd, resp):
        if not self.logfile:
            return
        now = time.monotonic()
        delta_ms = 0 if self._last_ts is None else int((now - self._last_ts) * 1000)
        self._last_ts = now
        async_log(self.logfile, {
            "ts": datetime.now().isoformat(),
            "session": self.session_id,
            "ip": self.ip,
            "user": self.username,
            "cwd": cwd,
            "cmd": cmd,
            "resp": strip_markup(resp),
            "delta_ms": delta_ms,
        })

    # ------------------------------------------------
    # Key handling
    # ------------------------------------------------
    def _redraw_terminal(self):
        lines = self.session.output[-SCROLLBACK:]
        body = "".join(crlf(line) + "\r\n" for line in lines)
        return CLEAR_SCREEN + body + self.session.prompt()

    def handle_editor_key(self, key):
        editor = self.session.editor
        action, echo = editor.feed(key)
        if action == Editor.SAVE:
            status = self.session.save_editor()
            return editor.screen(self.session.color) + "\r\n\r\n" + status
        if action == Editor.CLOSE:
            self.session.close_editor()
            return self._redraw_terminal()
        if action == Editor.HELP:
            return editor.screen(self.session.color) + "\r\n\r\n" + crlf(EDITOR_HELP)
        if action == Editor.REDRAW:
            return editor.screen(self.session.color)
        return echo

    def handle_prompt_key(self, key):
        """Returns the text to send and whether the session should end."""
        result = self.reader.feed(key)
        if result.event == EOF:
            return result.echo, True
        if result.event == CANCEL:
            return result.echo + self.session.prompt(), False
        if result.event == CLEAR:
            self.session.output = []
            return CLEAR_SCREEN + self.session.prompt() + self.reader.line, False
        if result.event != SUBMIT:
            return result.echo, False

        line = result.line
        if line.strip() in EXIT_COMMANDS:
            return result.echo + "logout\r\n", True

        cwd = self.session.cwd
        resp = self.session.run(line)
        if line.strip():
            self.record(cwd, line.strip(), resp)

        out = result.echo
        if self.session.pending_clear:
            self.session.pending_clear = False
            out = CLEAR_SCREEN
        elif resp:
            out += crlf(resp) + "\r\n"

        if self.session.editor is not None:
            return out + self.session.editor.screen(self.session.color), False
        return out + self.session.prompt(), False

    # ------------------------------------------------
    # MAIN SHELL LOOP
    # ------------------------------------------------
    def handle_shell(self):
        try:
            self.channel.sendall(crlf(self.session.output[0]) + "\r\n" + self.session.prompt())
            done = False
            while not done:
                raw = self.channel.recv(1024)
                if not raw:
                    break

                out = []
                for key in split_keys(self._decoder.decode(raw)):
                    if self.session.editor is not None:
                        out.append(self.handle_editor_key(key))
                        continue
                    text, done = self.handle_prompt_key(key)
                    out.append(text)
                    if done:
                        break

                if any(out):
                    self.channel.sendall("".join(out))

        except Exception as e:
            logger.warning("[%s] shell closed: %s", self.session_id, e)

        logger.info("[%s] session ended", self.session_id)
        self.channel.close()


# ------------------------------------------------
# Start Server
# ------------------------------------------------
def start_ssh_server(host=settings.SSH_HOST, port=settings.SSH_PORT,
                     host_key_path=settings.HOST_KEY_PATH, log_dir=settings.LOG_DIR,
                     color=settings.COLOR):
    host_key = load_host_key(host_key_path)
    os.makedirs(log_dir, exist_ok=True)
    logfile = os.path.join(log_dir, f"log_{datetime.now().strftime('%Y%m%d_%H%M%S')}.jsonl")

    server_socket = socket.socket()
    server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    server_socket.bind((host, port))
    server_socket.listen(100)

    logger.info("Terminux SSH server running on port %d, transcripts in %s", port, logfile)

    while True:
        client, addr = server_socket.accept()
        logger.info("Connection: %s", addr)
        threading.Thread(
            target=handle_client,
            args=(client, host_key, logfile, color),
            daemon=True
        ).start()


def handle_client(client, host_key, logfile, color=True):
    transport = paramiko.Transport(client)
    transport.add_server_key(host_key)
    handler = SSHServerHandler(logfile, color)
    handler.ip = client.getpeername()[0]

    try:
        transport.start_server(server=handler)
    except paramiko.SSHException as e:
        logger.warning("SSH negotiation failed for %s: %s", handler.ip, e)
        return

    chan = transport.accept(20)
    if chan is None:
        logger.warning("No channel opened by %s", handler.ip)
        transport.close()
        return

    handler.channel = chan
    handler.event.wait(10)
    handler.handle_shell()
    transport.close()
