"""
Directory creation with explicit permissions.

Creating all missing ancestors with a single "create parents" call applies
the requested permission to the last directory only, while intermediate
directories get the umask of the remote side. To give every created
directory the same permission, ancestors are created one level at a time:

1. :func:`plan_directory_creation` walks up from the target and stacks every
   missing ancestor until it meets an existing one.
2. :func:`create_directories` creates the stacked paths outermost first,
   target last, each with an explicit permission.

Both steps issue separate probes and creations: the plan may be outdated by
the time it is applied if the namespace is modified concurrently.
"""

import posixpath
from typing import Callable, List, Optional
import hdfsufs.config as config
from hdfsufs.exceptions import DirectoryDepthExceededError


def plan_directory_creation(path: str,
                            exists: Callable[[str], bool],
                            max_depth: Optional[int] = None) -> List[str]:
    """
    Compute the directories to create for `path`.

    Args:
        path (str): Target directory.
        exists (Callable[[str], bool]): Existence probe.
        max_depth (Optional[int]): Maximum number of ancestors to walk.
            Defaults to ``UFS_MKDIRS_MAX_DEPTH`` from the configuration.

    Returns:
        List[str]: Directories to create in creation order (outermost missing
        ancestor first, `path` last). Empty if `path` already exists.

    Raises:
        DirectoryDepthExceededError: If no existing ancestor is found within `max_depth` levels.
    """
    if max_depth is None:
        max_depth = int(config.UFS_MKDIRS_MAX_DEPTH)
    if exists(path):
        return []

    plan = [path]
    current = path
    parent = posixpath.dirname(path)
    while not exists(parent):
        if parent == current or len(plan) - 1 >= max_depth:
            raise DirectoryDepthExceededError(f"No existing ancestor found for {path} within {max_depth} levels")
        plan.append(parent)
        current, parent = parent, posixpath.dirname(parent)

    plan.reverse()
    return plan


def create_directories(plan: List[str], mkdir: Callable[[str, int], bool], permission: int) -> bool:
    """
    Create the directories of a plan in order.

    Args:
        plan (List[str]): Directories in creation order.
        mkdir (Callable[[str, int], bool]): Creation of a single directory with a permission.
        permission (int): Permission applied to every directory.

    Returns:
        bool: True if every directory was created, False at the first failed creation.
    """
    for directory in plan:
        if not mkdir(directory, permission):
            return False
    return True
