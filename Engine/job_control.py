import os
import signal
from dataclasses import dataclass, field

import psutil

from config import MAX_CMDLINE_COPY, MAX_JOBS


@dataclass
class Job:
    """Background command: every stage pid plus the text that started it"""
    pid: int
    cmdline: str
    pids: tuple = ()
    running: bool = True
    pending: set = field(default_factory=set, repr=False)

    def __post_init__(self):
        self.cmdline = self.cmdline[:MAX_CMDLINE_COPY - 1]
        if not self.pids:
            self.pids = (self.pid,)
        self.pending = set(self.pids)

    @property
    def status(self):
        return "running" if self.running else "finished"

    def owns(self, pid):
        return pid in self.pids

    def collect(self, pid):
        """Record that one stage exited. Returns True once the whole job is done."""
        self.pending.discard(pid)
        if self.running and not self.pending:
            self.running = False
            return True
        return False


class JobTable:
    """
    Append-only, bounded list of background jobs.
    Entries are never removed or recycled; once full, new jobs go untracked.
    """

    def __init__(self, capacity=MAX_JOBS):
        self.capacity = capacity
        self._jobs = []

    def add(self, pids, cmdline):
        """
        Register a running job for the given stage pids.
        Returns: Job, or None when the table is full
        """
        if len(self._jobs) >= self.capacity:
            return None
        pids = tuple(pids)
        job = Job(pid=pids[-1], cmdline=cmdline, pids=pids)
        self._jobs.append(job)
        return job

    def find(self, pid):
        for job in self._jobs:
            if job.owns(pid):
                return job
        return None

    def collect(self, pid):
        job = self.find(pid)
        if job is not None:
            job.collect(pid)
        return job

    def running_jobs(self):
        return [job for job in self._jobs if job.running]

    def __iter__(self):
        return iter(list(self._jobs))

    def __len__(self):
        return len(self._jobs)


def reap(table):
    """
    Collect every child that has already exited, without blocking.
    Returns: list of collected pids
    """
    collected = []
    while True:
        try:
            pid, _ = os.waitpid(-1, os.WNOHANG)
        except ChildProcessError:
            break
        if pid == 0:
            break
        collected.append(pid)
        table.collect(pid)

    # stages collected somewhere else (e.g. by subprocess) never show up above
    for job in table.running_jobs():
        for pid in list(job.pending):
            if not psutil.pid_exists(pid):
                job.collect(pid)

    return collected


def terminate(pid, table):
    """
    Send SIGTERM to any pid and record it as gone from its tracked job.
    Raises: OSError when the signal cannot be delivered
    """
    os.kill(pid, signal.SIGTERM)
    return table.collect(pid)


def format_job(index, job):
    return f"[{index}] PID: {job.pid}  {job.cmdline}  ({job.status})"
