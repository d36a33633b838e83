"""
Termination of spawned diagnostics processes.

A cancelled query must not leave its child behind, so the child and every
descendant it started are killed and waited for.
"""

import logging
from typing import List

import psutil

logger = logging.getLogger(__name__)


def _is_process_alive(process: psutil.Process) -> bool:
    """Check if a process is still alive and not a zombie."""
    try:
        if not process.is_running():
            return False
        return process.status() not in (psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD)
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return False


def _get_process_children(parent: psutil.Process) -> List[psutil.Process]:
    """Get all live descendants of a process."""
    try:
        return [child for child in parent.children(recursive=True) if _is_process_alive(child)]
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        # Parent exited during enumeration
        return []


def terminate_process_tree(pid: int, name: str, timeout: float = 3.0) -> List[int]:
    """
    Kill a process and all of its descendants.

    Descendants are collected before the parent is killed, since they are
    re-parented once it exits.

    Args:
        pid: PID of the root process.
        name: Human-readable name for log messages.
        timeout: Seconds to wait for the killed processes to disappear.

    Returns:
        PIDs that were still alive after the timeout (normally empty).
    """
    if pid <= 0:
        logger.warning(f"Invalid PID {pid} for {name}, skipping termination")
        return []

    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        logger.debug(f"Process {name} (PID: {pid}) already terminated")
        return []

    processes = _get_process_children(parent) + [parent]
    logger.debug(f"Killing {name} (PID: {pid}) and {len(processes) - 1} descendants")

    for process in processes:
        try:
            process.kill()
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied:
            logger.warning(f"Access denied killing PID {process.pid} of {name}")

    _, still_alive = psutil.wait_procs(processes, timeout=timeout)
    # Zombies are dead for our purposes; the owner reaps them.
    stubborn = [p.pid for p in still_alive if _is_process_alive(p)]
    if stubborn:
        logger.error(f"Failed to kill {len(stubborn)} processes of {name}: {stubborn}")
    return stubborn
