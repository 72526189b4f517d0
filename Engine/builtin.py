import os
from enum import IntEnum

from config import PROGRAM_NAME
from Engine.job_control import format_job, reap, terminate


class Outcome(IntEnum):
    """What the main loop should do after a built-in"""
    EXIT = 0
    CONTINUE = 1


def builtin_cd(args, session):
    """Change directory"""
    if not args:
        print(f'{PROGRAM_NAME}: expected argument to "cd"', file=session.err)
        return Outcome.CONTINUE
    try:
        os.chdir(args[0])
    except OSError as e:
        print(f"{PROGRAM_NAME}: cd: {args[0]}: {e.strerror}", file=session.err)
    except ValueError as e:
        print(f"{PROGRAM_NAME}: cd: {args[0]!r}: {e}", file=session.err)
    return Outcome.CONTINUE


def builtin_exit(args, session):
    return Outcome.EXIT


def builtin_help(args, session):
    """Print help message"""
    out = session.out
    print("rocketsh - a small command interpreter", file=out)
    print("Type program names and arguments, and hit enter.", file=out)
    print("The following are built in:", file=out)
    for name in BUILTINS:
        print(f"  {name}", file=out)
    print("Use the man command for information on other programs.", file=out)
    print("Supports piping ('|'), I/O redirection ('<', '>', '>>'), "
          "and background tasks ('&').", file=out)
    return Outcome.CONTINUE


def builtin_pwd(args, session):
    try:
        print(os.getcwd(), file=session.out)
    except OSError as e:
        print(f"{PROGRAM_NAME}: pwd: {e.strerror}", file=session.err)
    return Outcome.CONTINUE


def builtin_echo(args, session):
    print(" ".join(args), file=session.out)
    return Outcome.CONTINUE


def builtin_history(args, session):
    """Show command history, oldest first"""
    for i, line in enumerate(session.history.entries(), start=1):
        print(f"{i:4d}  {line}", file=session.out)
    return Outcome.CONTINUE


def builtin_env(args, session):
    for key, value in os.environ.items():
        print(f"{key}={value}", file=session.out)
    return Outcome.CONTINUE


def builtin_set(args, session):
    """set VAR VALUE"""
    if len(args) < 2:
        print("Usage: set VAR VALUE", file=session.err)
        return Outcome.CONTINUE
    try:
        os.environ[args[0]] = args[1]
    except (OSError, ValueError) as e:
        print(f"{PROGRAM_NAME}: set: {e}", file=session.err)
    return Outcome.CONTINUE


def builtin_unset(args, session):
    """unset VAR"""
    if not args:
        print("Usage: unset VAR", file=session.err)
        return Outcome.CONTINUE
    try:
        os.environ.pop(args[0], None)
    except (OSError, ValueError) as e:
        print(f"{PROGRAM_NAME}: unset: {e}", file=session.err)
    return Outcome.CONTINUE


def builtin_jobs(args, session):
    """List background jobs after collecting finished ones"""
    reap(session.jobs)
    if not len(session.jobs):
        print("No background jobs.", file=session.out)
        return Outcome.CONTINUE
    for i, job in enumerate(session.jobs, start=1):
        print(format_job(i, job), file=session.out)
    return Outcome.CONTINUE


def builtin_kill(args, session):
    """kill PID: SIGTERM to any process, tracked or not"""
    if not args:
        print("Usage: kill PID", file=session.err)
        return Outcome.CONTINUE
    try:
        pid = int(args[0])
    except ValueError:
        pid = 0
    if pid <= 0:
        print(f"Invalid PID: {args[0]}", file=session.err)
        return Outcome.CONTINUE
    try:
        terminate(pid, session.jobs)
    except OSError as e:
        print(f"{PROGRAM_NAME}: kill: ({pid}) - {e.strerror}", file=session.err)
    except OverflowError:
        # larger than any pid the platform can hold
        print(f"Invalid PID: {args[0]}", file=session.err)
    return Outcome.CONTINUE


# Order matters: help lists the names in this order
BUILTINS = {
    'cd': builtin_cd,
    'exit': builtin_exit,
    'help': builtin_help,
    'pwd': builtin_pwd,
    'echo': builtin_echo,
    'history': builtin_history,
    'env': builtin_env,
    'set': builtin_set,
    'unset': builtin_unset,
    'jobs': builtin_jobs,
    'kill': builtin_kill,
}


def is_builtin(args):
    return bool(args) and args[0] in BUILTINS


def execute_builtin(args, session):
    """
    Run a built-in in the shell's own process.
    Returns: Outcome, or None when args[0] is not a built-in
    """
    if not is_builtin(args):
        return None
    return BUILTINS[args[0]](args[1:], session)
