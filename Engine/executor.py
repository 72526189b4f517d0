import os
import subprocess

from config import NEW_FILE_MODE, PROGRAM_NAME, STATUS_NOT_STARTED


def open_redirections(stage):
    """
    Open the files a stage reads from / writes to.
    Returns: (stdin_fd, stdout_fd), either may be None
    Raises: OSError or ValueError, with nothing left open
    """
    stdin_fd = stdout_fd = None
    if stage.stdin_path is not None:
        stdin_fd = os.open(stage.stdin_path, os.O_RDONLY)
    if stage.stdout_path is not None:
        flags = os.O_WRONLY | os.O_CREAT
        flags |= os.O_APPEND if stage.append else os.O_TRUNC
        try:
            stdout_fd = os.open(stage.stdout_path, flags, NEW_FILE_MODE)
        except (OSError, ValueError):
            if stdin_fd is not None:
                os.close(stdin_fd)
            raise
    return stdin_fd, stdout_fd


def run_external(argv, stdin=None, stdout=None, background=False, err=None):
    """
    Start one program, looked up on PATH.
    Returns: Popen object or None
    """
    try:
        if background:
            # own process group: Ctrl-C at the terminal must not reach it
            return subprocess.Popen(argv, stdin=stdin, stdout=stdout, preexec_fn=os.setpgrp)
        return subprocess.Popen(argv, stdin=stdin, stdout=stdout)
    except FileNotFoundError:
        print(f"{PROGRAM_NAME}: {argv[0]}: command not found", file=err)
    except PermissionError:
        print(f"{PROGRAM_NAME}: {argv[0]}: permission denied", file=err)
    except OSError as e:
        print(f"{PROGRAM_NAME}: {argv[0]}: {e.strerror or e}", file=err)
    except ValueError as e:
        # e.g. an embedded NUL byte in an argument
        print(f"{PROGRAM_NAME}: {argv[0]!r}: {e}", file=err)
    return None


def wait_foreground(procs):
    """Block until every started stage has exited; interrupts do not cut the wait short"""
    for p in procs:
        while True:
            try:
                p.wait()
                break
            except KeyboardInterrupt:
                # the child got the same SIGINT through the shared process group
                continue


def _close_all(fds):
    for fd in fds:
        try:
            os.close(fd)
        except OSError:
            pass


def execute_pipeline(command, session, cmdline):
    """
    Launch a ParsedCommand: one program, or two joined by a pipe.
    Returns: exit status of the last stage (0 for background jobs)
    """
    out, err = session.out, session.err
    parent_fds = []
    redirections = []

    try:
        for stage in command.stages:
            try:
                fds = open_redirections(stage)
            except OSError as e:
                print(f"{PROGRAM_NAME}: {e.filename}: {e.strerror}", file=err)
                return 1
            except ValueError as e:
                print(f"{PROGRAM_NAME}: redirection: {e}", file=err)
                return 1
            parent_fds.extend(fd for fd in fds if fd is not None)
            redirections.append(fds)

        pipe_r = pipe_w = None
        if command.is_pipeline:
            try:
                pipe_r, pipe_w = os.pipe()
            except OSError as e:
                print(f"{PROGRAM_NAME}: pipe: {e.strerror}", file=err)
                return 1
            parent_fds.extend((pipe_r, pipe_w))

        out.flush()
        err.flush()

        procs = []
        last_proc = None
        for idx, (stage, (stdin_fd, stdout_fd)) in enumerate(zip(command.stages, redirections)):
            is_last = idx == len(command.stages) - 1
            # an explicit file beats the pipe end on the same stream
            stdin = stdin_fd if stdin_fd is not None else (pipe_r if idx > 0 else None)
            stdout = stdout_fd if stdout_fd is not None else (None if is_last else pipe_w)

            p = run_external(stage.argv, stdin=stdin, stdout=stdout,
                             background=command.background, err=err)
            if p is not None:
                procs.append(p)
            if is_last:
                last_proc = p
    finally:
        # children hold their own copies now
        _close_all(parent_fds)

    if command.background:
        if procs:
            session.jobs.add([p.pid for p in procs], cmdline)
            print(f"Started background job with PID: {procs[-1].pid}", file=out)
        return 0

    wait_foreground(procs)
    if last_proc is None:
        return STATUS_NOT_STARTED
    return last_proc.returncode
