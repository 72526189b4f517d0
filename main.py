#!/usr/bin/env python3
"""
rocketsh – Python 3
Features:
 - Builtins: cd, exit, help, pwd, echo, history, env, set, unset, jobs, kill
 - External commands via subprocess, looked up on PATH
 - One pipe (a | b)
 - I/O redirection: <, >, >>
 - Background execution with trailing &
 - Ctrl+C re-prompts instead of exiting
"""
from Engine.shell import main_loop


def main():
    main_loop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
