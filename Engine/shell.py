import os
import sys

from config import MAX_CMDLINE_COPY, MAX_LINE_LEN, PROGRAM_NAME, PROMPT_MARKER
from Engine.builtin import Outcome, execute_builtin
from Engine.executor import execute_pipeline
from Engine.history import History, init_readline
from Engine.job_control import JobTable, reap
from Engine.parser import ParseError, parse_command, tokenize


class Session:
    """Everything one interpreter owns: history, jobs and where output goes"""

    def __init__(self, out=None, err=None, history=None, jobs=None):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.history = history if history is not None else History()
        self.jobs = jobs if jobs is not None else JobTable()
        self.last_status = 0


def prompt(session):
    """Generate shell prompt"""
    try:
        cwd = os.getcwd()
    except OSError as e:
        print(f"{PROGRAM_NAME}: getcwd: {e.strerror}", file=session.err)
        return f"{PROMPT_MARKER} > "
    return f"{PROMPT_MARKER} {cwd} > "


def execute_line(line, session):
    """
    Run one line of input.
    Returns: Outcome.EXIT when the interpreter should stop
    """
    line = line[:MAX_LINE_LEN].rstrip("\n")
    args = tokenize(line)
    if not args:
        return Outcome.CONTINUE

    cmdline = line[:MAX_CMDLINE_COPY - 1]
    session.history.add(cmdline)

    outcome = execute_builtin(args, session)
    if outcome is not None:
        return outcome

    try:
        command = parse_command(args)
    except ParseError as e:
        print(f"{PROGRAM_NAME}: syntax error: {e}", file=session.err)
        session.last_status = 2
        return Outcome.CONTINUE

    session.last_status = execute_pipeline(command, session, cmdline)
    return Outcome.CONTINUE


def main_loop(session=None):
    """Main shell loop"""
    session = session if session is not None else Session()
    init_readline()

    while True:
        # finished background jobs are only noticed here and by `jobs`
        reap(session.jobs)

        try:
            line = input(prompt(session))
        except EOFError:
            print("exit", file=session.out)
            break
        except KeyboardInterrupt:
            print(file=session.out)
            continue
        except UnicodeDecodeError as e:
            print(f"{PROGRAM_NAME}: cannot decode input: {e.reason}", file=session.err)
            continue

        try:
            if execute_line(line, session) is Outcome.EXIT:
                break
        except KeyboardInterrupt:
            print(file=session.out)
