#!/usr/bin/env python3
"""
Path resolution for the in-memory filesystem.

Every operation that takes a path goes through ``resolve``. It walks the
tree segment by segment starting at the root (absolute paths) or at a
given directory (relative paths) and reports either the node found, or the
directory and leaf name where a new node could be created.

Rules:
- empty path is an invalid argument
- a leading '/' restarts at the root
- empty segments ('//', trailing '/') are skipped
- '..' moves up one level and is a no-op at the root
- '.' stays where it is
- every non-final segment must name an existing directory
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .node import Node
from .results import ErrorKind, Result

logger = logging.getLogger(__name__)


class ResolveMode(Enum):
    """How the final path segment is treated."""
    LOOKUP = 'lookup'                  # final segment must exist
    CREATE = 'create'                  # final segment may be missing
    CREATE_PARENTS = 'create_parents'  # as CREATE, fabricating missing ancestors


@dataclass
class Resolution:
    """
    Where a path points.

    ``node`` is the existing target or None when the leaf does not exist
    (create modes only). ``parent`` and ``name`` locate the leaf; for the
    root, ``parent`` is None and ``name`` is '/'.
    """
    parent: Optional[Node]
    name: str
    node: Optional[Node] = None

    @property
    def exists(self) -> bool:
        return self.node is not None


def split_path(path: str) -> List[str]:
    """Split a path into its non-empty segments."""
    return [segment for segment in path.split('/') if segment]


def resolve(root: Node, start: Node, path: str,
            mode: ResolveMode = ResolveMode.LOOKUP) -> Result:
    """
    Resolve ``path`` against the tree.

    Returns a Result whose data is a Resolution. The tree is never modified
    except in CREATE_PARENTS mode, where missing intermediate directories
    are created; if resolution then fails, those directories are removed
    again before returning.
    """
    if not path:
        return Result.failure(ErrorKind.INVALID_ARGUMENT, 'empty path')

    current = root if path.startswith('/') else start
    segments = split_path(path)
    created: List[Node] = []

    def fail(error: ErrorKind, message: str) -> Result:
        for node in reversed(created):
            node.detach()
        logger.debug("resolve %r failed: %s", path, message)
        return Result.failure(error, message)

    for index, segment in enumerate(segments):
        last = index == len(segments) - 1

        if segment == '.':
            continue
        if segment == '..':
            if current.parent is not None:
                current = current.parent
            continue

        match = current.child(segment)

        if last:
            if match is None and mode is ResolveMode.LOOKUP:
                return fail(ErrorKind.NOT_FOUND, f"{path}: No such file or directory")
            return Result.success(Resolution(parent=current, name=segment, node=match))

        if match is None:
            if mode is not ResolveMode.CREATE_PARENTS:
                return fail(ErrorKind.NOT_FOUND, f"{path}: No such file or directory")
            match = Node.directory(segment)
            current.attach(match)
            created.append(match)
            logger.debug("created intermediate directory %s", match.path)
        elif not match.is_dir():
            return fail(ErrorKind.NOT_A_DIRECTORY, f"{path}: Not a directory")

        current = match

    # The path ended on '.', '..' or was only slashes: the target is the
    # directory we are standing on.
    return Result.success(Resolution(parent=current.parent, name=current.name, node=current))


def lookup(root: Node, start: Node, path: str) -> Result:
    """Resolve an existing node; Result.data is the Node itself."""
    result = resolve(root, start, path, ResolveMode.LOOKUP)
    if not result:
        return result
    return Result.success(result.data.node)
