import sys
import readline
from collections import deque

from config import MAX_CMDLINE_COPY, MAX_HISTORY


class History:
    """In-memory command log. Once full, the oldest entry is dropped."""

    def __init__(self, capacity=MAX_HISTORY):
        self._entries = deque(maxlen=capacity)

    @property
    def capacity(self):
        return self._entries.maxlen

    def add(self, line):
        line = line[:MAX_CMDLINE_COPY - 1]
        self._entries.append(line)

    def entries(self):
        return list(self._entries)

    def __len__(self):
        return len(self._entries)


def init_readline():
    """Configure readline so the prompt edits like a Linux terminal"""
    try:
        if not sys.stdin.isatty():
            return

        readline.set_history_length(MAX_HISTORY)

        # Up/Down walk through history
        readline.parse_and_bind("\\e[A: previous-history")
        readline.parse_and_bind("\\e[B: next-history")

        # Ctrl+Left/Right jump between words
        readline.parse_and_bind("\\e[1;5D: backward-word")
        readline.parse_and_bind("\\e[1;5C: forward-word")

        readline.parse_and_bind("set editing-mode emacs")

    except Exception as e:
        print(f"Warning: Could not configure readline: {e}", file=sys.stderr)
