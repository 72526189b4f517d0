import re
from dataclasses import dataclass, field

from config import MAX_ARGS, TOKEN_DELIMITERS

REDIRECT_IN = "<"
REDIRECT_OUT = ">"
REDIRECT_APPEND = ">>"
PIPE = "|"
BACKGROUND = "&"

OPERATORS = (REDIRECT_IN, REDIRECT_OUT, REDIRECT_APPEND, PIPE)

_SPLIT_RE = re.compile("[" + re.escape(TOKEN_DELIMITERS) + "]+")


class ParseError(ValueError):
    """Command line cannot be turned into something runnable"""


@dataclass
class Stage:
    """One command of a pipeline with its own redirections."""
    argv: list = field(default_factory=list)
    stdin_path: str = None
    stdout_path: str = None
    append: bool = False


@dataclass
class ParsedCommand:
    stages: list
    pipe_index: int = None
    background: bool = False

    @property
    def is_pipeline(self):
        return len(self.stages) > 1


def tokenize(line):
    """
    Split a raw line on whitespace. No quoting or escaping.
    Returns: list of at most MAX_ARGS - 1 tokens
    """
    tokens = [tok for tok in _SPLIT_RE.split(line) if tok]
    return tokens[:MAX_ARGS - 1]


def _build_stage(tokens):
    """
    Resolve <, > and >> inside one side of a pipeline.
    argv stops at the first operator; every operator takes the next token.
    """
    stage = Stage()
    argv_end = None
    i = 0

    while i < len(tokens):
        tok = tokens[i]
        if tok in (REDIRECT_IN, REDIRECT_OUT, REDIRECT_APPEND):
            if argv_end is None:
                argv_end = i
            if i + 1 >= len(tokens) or tokens[i + 1] in OPERATORS:
                raise ParseError(f"missing file name after '{tok}'")
            target = tokens[i + 1]
            if tok == REDIRECT_IN:
                stage.stdin_path = target
            else:
                stage.stdout_path = target
                stage.append = tok == REDIRECT_APPEND
            i += 2
        else:
            i += 1

    stage.argv = list(tokens[:argv_end])
    if not stage.argv:
        raise ParseError("missing command")
    return stage


def parse_command(tokens):
    """
    Strip a trailing &, split on the first | and resolve redirections.
    Returns: ParsedCommand
    """
    tokens = list(tokens)
    background = bool(tokens) and tokens[-1] == BACKGROUND
    if background:
        tokens.pop()
    if not tokens:
        raise ParseError("missing command")

    # only the first pipe splits; a later one stays a literal argument
    pipe_index = None
    if PIPE in tokens:
        pipe_index = tokens.index(PIPE) + 1

    if pipe_index is None:
        stages = [_build_stage(tokens)]
    else:
        left = tokens[:pipe_index - 1]
        right = tokens[pipe_index:]
        if not left or not right:
            raise ParseError("missing command around '|'")
        stages = [_build_stage(left), _build_stage(right)]

    return ParsedCommand(stages=stages, pipe_index=pipe_index, background=background)
