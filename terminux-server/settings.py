# settings.py
import os

# SSH server
SSH_HOST = os.getenv("TERMINUX_HOST", "")
SSH_PORT = int(os.getenv("TERMINUX_PORT", "2222"))

# RSA host key, generated on first start if the file is missing
HOST_KEY_PATH = os.getenv("TERMINUX_HOST_KEY", "server.key")

# Session transcripts (JSONL) and log verbosity
LOG_DIR = os.getenv("TERMINUX_LOG_DIR", "logs")
LOG_LEVEL = os.getenv("TERMINUX_LOG_LEVEL", "INFO").upper()

COLOR = os.getenv("TERMINUX_COLOR", "1").lower() not in ("0", "false", "no", "off")

# Pause between queued task lines, in seconds
TASK_DELAY = float(os.getenv("TERMINUX_TASK_DELAY", "0.8"))
