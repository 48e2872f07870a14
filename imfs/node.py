#!/usr/bin/env python3
"""
Tree nodes for the in-memory filesystem.

A Node is either a file (holding bytes) or a directory (holding children).
Children are owned by their directory; ``parent`` is only a back-reference
used to walk upwards for ``..`` and for rebuilding absolute paths.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional


class Kind(Enum):
    """Node type, fixed at creation."""
    FILE = 'file'
    DIRECTORY = 'dir'


ROOT_NAME = '/'


@dataclass(eq=False)
class Node:
    """A single file-or-directory entry."""
    name: str
    kind: Kind
    content: bytes = b''
    children: Dict[str, 'Node'] = field(default_factory=dict)  # name -> node, insertion ordered
    parent: Optional['Node'] = field(default=None, repr=False)
    created_at: float = field(default_factory=time.time)
    modified_at: float = 0.0

    def __post_init__(self):
        if not self.modified_at:
            self.modified_at = self.created_at

    @classmethod
    def directory(cls, name: str) -> 'Node':
        return cls(name=name, kind=Kind.DIRECTORY)

    @classmethod
    def file(cls, name: str, content: bytes = b'') -> 'Node':
        return cls(name=name, kind=Kind.FILE, content=content)

    def is_dir(self) -> bool:
        return self.kind is Kind.DIRECTORY

    def is_file(self) -> bool:
        return self.kind is Kind.FILE

    def is_root(self) -> bool:
        return self.parent is None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def path(self) -> str:
        """Absolute path rebuilt from parent links."""
        names = []
        node = self
        while node.parent is not None:
            names.append(node.name)
            node = node.parent
        return '/' + '/'.join(reversed(names))

    def child(self, name: str) -> Optional['Node']:
        return self.children.get(name)

    def attach(self, node: 'Node') -> None:
        """Append ``node`` as the last child of this directory."""
        self.children[node.name] = node
        node.parent = self

    def detach(self) -> None:
        """Remove this node (and so its whole subtree) from its parent."""
        if self.parent is not None:
            del self.parent.children[self.name]
            self.parent = None

    def touch(self) -> None:
        self.modified_at = time.time()

    def is_ancestor_of(self, other: 'Node') -> bool:
        """True if ``other`` is this node or lies somewhere below it."""
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def walk(self) -> Iterator['Node']:
        """Pre-order traversal of the subtree, children in insertion order."""
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children.values())))

    def clone(self) -> 'Node':
        """
        Deep copy of this subtree.

        Every cloned node gets fresh timestamps and its own content; the
        clone is detached (no parent).
        """
        copy = Node(name=self.name, kind=self.kind, content=bytes(self.content))
        pending = [(self, copy)]
        while pending:
            source, target = pending.pop()
            for child in source.children.values():
                child_copy = Node(name=child.name, kind=child.kind,
                                  content=bytes(child.content))
                target.attach(child_copy)
                pending.append((child, child_copy))
        return copy
