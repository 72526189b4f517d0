PROGRAM_NAME = "rocketsh"

MAX_LINE_LEN = 1024
MAX_ARGS = 64  # one slot reserved, so at most MAX_ARGS - 1 tokens
MAX_HISTORY = 100
MAX_JOBS = 64
MAX_CMDLINE_COPY = 512

TOKEN_DELIMITERS = " \t\r\n\a"

PROMPT_MARKER = "🚀"

NEW_FILE_MODE = 0o644

# exit status used when a stage could not be started at all
STATUS_NOT_STARTED = 127
