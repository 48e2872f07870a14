#!/usr/bin/env python3
"""
imfs - An in-memory hierarchical filesystem.

Core philosophy:
- One tree, one root, one current directory
- Every path goes through the same resolver
- Operations either apply one complete edit or change nothing
- Failures are returned as Result values, never raised
"""

import logging
from typing import Optional, Union

from .node import Node, ROOT_NAME
from .path_resolver import ResolveMode, Resolution, lookup, resolve
from .results import ErrorKind, Result

logger = logging.getLogger(__name__)


class FileSystem:
    """
    In-memory filesystem tree.

    Holds the root directory and the current working directory. All
    public methods return a Result; see ``imfs.results``.
    """

    def __init__(self):
        self.root = Node.directory(ROOT_NAME)
        self.cwd = self.root

    # Path helpers

    def _resolve(self, path: str, mode: ResolveMode = ResolveMode.LOOKUP) -> Result:
        return resolve(self.root, self.cwd, path, mode)

    def _lookup(self, path: str) -> Result:
        return lookup(self.root, self.cwd, path)

    def _reject(self, op: str, error: ErrorKind, message: str) -> Result:
        logger.debug("%s rejected (%s): %s", op, error.name, message)
        return Result.failure(error, message)

    def exists(self, path: str) -> bool:
        """Check if a path exists."""
        return bool(self._lookup(path))

    def get(self, path: str) -> Optional[Node]:
        """Return the node at ``path`` or None."""
        result = self._lookup(path)
        return result.data if result else None

    # Navigation and queries

    def pwd(self) -> Result:
        """Absolute path of the current directory."""
        return Result.success(self.cwd.path)

    def cd(self, path: str) -> Result:
        """Change the current directory."""
        result = self._lookup(path)
        if not result:
            return result
        node = result.data
        if not node.is_dir():
            return self._reject('cd', ErrorKind.NOT_A_DIRECTORY, f"{path}: Not a directory")
        self.cwd = node
        return Result.success(node.path)

    def ls(self, path: Optional[str] = None) -> Result:
        """
        List child names in insertion order.

        Without a path the current directory is listed. A file path lists
        just the file's own name.
        """
        if path is None:
            node = self.cwd
        else:
            result = self._lookup(path)
            if not result:
                return result
            node = result.data
        if node.is_file():
            return Result.success([node.name])
        return Result.success(list(node.children))

    def cat(self, path: str) -> Result:
        """Read a file's content."""
        result = self._lookup(path)
        if not result:
            return result
        node = result.data
        if not node.is_file():
            return self._reject('cat', ErrorKind.NOT_A_FILE, f"{path}: Is a directory")
        return Result.success(node.content)

    read = cat

    def stat(self, path: str) -> Result:
        """File or directory statistics."""
        result = self._lookup(path)
        if not result:
            return result
        node = result.data
        return Result.success({
            'type': node.kind.value,
            'name': node.name,
            'path': node.path,
            'size': node.size,
            'children': len(node.children),
            'created_at': node.created_at,
            'modified_at': node.modified_at,
        })

    def find(self, substring: str) -> Result:
        """
        First node, in pre-order from the root, whose name contains
        ``substring``. The root itself is not a candidate.
        """
        if not substring:
            return Result.failure(ErrorKind.INVALID_ARGUMENT, 'empty search string')
        nodes = self.root.walk()
        next(nodes)  # skip the root
        for node in nodes:
            if substring in node.name:
                return Result.success(node.path)
        return Result.failure(ErrorKind.NOT_FOUND, f"{substring}: no match")

    # Creation

    def mkdir(self, path: str, parents: bool = False) -> Result:
        """
        Create a directory.

        An existing entry with the same name makes this a no-op. With
        ``parents`` missing intermediate directories are created as well.
        """
        mode = ResolveMode.CREATE_PARENTS if parents else ResolveMode.CREATE
        result = self._resolve(path, mode)
        if not result:
            return result
        resolution: Resolution = result.data
        if resolution.exists:
            return Result.success(resolution.node.path)
        node = Node.directory(resolution.name)
        resolution.parent.attach(node)
        logger.debug("mkdir %s", node.path)
        return Result.success(node.path)

    def touch(self, path: str) -> Result:
        """Create an empty file, or refresh the timestamp of an existing entry."""
        result = self._resolve(path, ResolveMode.CREATE)
        if not result:
            return result
        resolution: Resolution = result.data
        if resolution.exists:
            resolution.node.touch()
            return Result.success(resolution.node.path)
        node = Node.file(resolution.name)
        resolution.parent.attach(node)
        logger.debug("touch %s", node.path)
        return Result.success(node.path)

    def write(self, path: str, data: Union[str, bytes], append: bool = False) -> Result:
        """
        Write ``data`` to a file, creating it if needed.

        Overwrites by default; ``append`` concatenates to the existing
        content. Returns the new file size.
        """
        if isinstance(data, str):
            data = data.encode('utf-8')

        result = self._resolve(path, ResolveMode.CREATE)
        if not result:
            return result
        resolution: Resolution = result.data

        node = resolution.node
        if node is not None and not node.is_file():
            return self._reject('write', ErrorKind.NOT_A_FILE, f"{path}: Is a directory")
        if node is None:
            node = Node.file(resolution.name)
            resolution.parent.attach(node)

        node.content = node.content + data if append else bytes(data)
        node.touch()
        logger.debug("write %s (%d bytes, append=%s)", node.path, len(data), append)
        return Result.success(node.size)

    # Removal

    def rm(self, path: str, recursive: bool = False) -> Result:
        """Remove a file or directory; non-empty directories need ``recursive``."""
        result = self._lookup(path)
        if not result:
            return result
        node: Node = result.data

        if node is self.root:
            return self._reject('rm', ErrorKind.INVALID_ARGUMENT, "cannot remove root directory")
        if node.is_dir() and node.children and not recursive:
            return self._reject('rm', ErrorKind.NON_EMPTY_DIRECTORY, f"{path}: Directory not empty")

        removed_path = node.path
        parent = node.parent
        if node.is_ancestor_of(self.cwd):
            self.cwd = parent
        node.detach()
        logger.debug("rm %s", removed_path)
        return Result.success(removed_path)

    # Move and copy

    def _destination(self, op: str, source: Node, dest: str) -> Result:
        """
        Work out where ``source`` would land for ``dest``.

        Data is a (directory, name) pair, or None when the source is
        already there.
        """
        result = self._resolve(dest, ResolveMode.CREATE)
        if not result:
            return result
        resolution: Resolution = result.data
        target = resolution.node

        if target is source:
            return Result.success(None)
        if target is None:
            return Result.success((resolution.parent, resolution.name))
        if target.is_file():
            return self._reject(op, ErrorKind.NAME_COLLISION, f"{dest}: File exists")

        occupant = target.child(source.name)
        if occupant is source:
            return Result.success(None)
        if occupant is not None:
            return self._reject(op, ErrorKind.NAME_COLLISION,
                                f"{occupant.path}: File exists")
        return Result.success((target, source.name))

    def _source(self, op: str, src: str) -> Result:
        result = self._lookup(src)
        if not result:
            return result
        if result.data is self.root:
            return self._reject(op, ErrorKind.INVALID_ARGUMENT, f"cannot {op} root directory")
        return result

    def mv(self, src: str, dst: str) -> Result:
        """
        Move or rename a file or directory.

        An existing directory destination receives the source under its
        own name; otherwise the destination's last segment becomes the
        new name.
        """
        result = self._source('mv', src)
        if not result:
            return result
        node: Node = result.data

        result = self._destination('mv', node, dst)
        if not result:
            return result
        if result.data is None:
            return Result.success(node.path)
        directory, name = result.data

        if node.is_dir() and node.is_ancestor_of(directory):
            return self._reject('mv', ErrorKind.INVALID_ARGUMENT,
                                f"cannot move '{src}' into itself")

        old_path = node.path
        node.detach()
        node.name = name
        directory.attach(node)
        logger.debug("mv %s -> %s", old_path, node.path)
        return Result.success(node.path)

    def cp(self, src: str, dst: str) -> Result:
        """Copy a file or a whole directory tree."""
        result = self._source('cp', src)
        if not result:
            return result
        node: Node = result.data

        result = self._destination('cp', node, dst)
        if not result:
            return result
        if result.data is None:
            return self._reject('cp', ErrorKind.NAME_COLLISION,
                                f"'{src}' and '{dst}' are the same file")
        directory, name = result.data

        copy = node.clone()
        copy.name = name
        directory.attach(copy)
        logger.debug("cp %s -> %s", node.path, copy.path)
        return Result.success(copy.path)

    def __repr__(self) -> str:
        return f"FileSystem(cwd={self.cwd.path!r})"
