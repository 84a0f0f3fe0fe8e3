"""File tree projection of a virtual file system.

This module turns the flat set of paths held by a VFS into the nested
folder/file structure shown in the project explorer:
- TreeNode: A single folder or file in the tree
- build_tree: Builds a sorted tree from a set of paths
- ExpansionState: Remembers which folders are open across rebuilds

The tree is a disposable projection. It is rebuilt from the VFS keys on every
change and never mutated in place.
"""

from typing import Iterable, Iterator, Literal

from pydantic import BaseModel


PATH_SEPARATOR = "/"

NodeType = Literal["folder", "file"]


class InvalidPathError(ValueError):
    """A path is empty, absolute, or contains an empty segment."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Invalid VFS path: {path!r}")


class PathConflictError(ValueError):
    """A path segment is used both as a file and as a folder.

    Example: ``a`` and ``a/b`` in the same set of paths.
    """

    def __init__(self, path: str, conflicting_path: str) -> None:
        self.path = path
        self.conflicting_path = conflicting_path
        super().__init__(
            f"Path {conflicting_path!r} conflicts with {path!r}: "
            "a segment cannot be both a file and a folder"
        )


def split_path(path: str) -> list[str]:
    """Split a VFS path into its segments.

    Args:
        path: A relative, slash-separated path (e.g. "components/Header.tsx").

    Returns:
        The list of path segments.

    Raises:
        InvalidPathError: If the path is empty, starts with a slash, or has
            an empty segment.
    """
    if not isinstance(path, str) or not path:
        raise InvalidPathError(path)
    segments = path.split(PATH_SEPARATOR)
    if any(segment == "" for segment in segments):
        raise InvalidPathError(path)
    return segments


class TreeNode(BaseModel):
    """A folder or file in the project tree.

    Attributes:
        name: Last path segment.
        path: Full path from the project root.
        type: Either "folder" or "file".
        children: Child nodes, in display order. None for files.
    """

    name: str
    path: str
    type: NodeType
    children: list["TreeNode"] | None = None

    @property
    def is_folder(self) -> bool:
        return self.type == "folder"


def _sort_key(node: TreeNode) -> tuple[int, str]:
    # Folders first, then case-sensitive name order
    return (0 if node.is_folder else 1, node.name)


def _sorted(nodes: list[TreeNode]) -> list[TreeNode]:
    result = []
    for node in sorted(nodes, key=_sort_key):
        if node.is_folder:
            node = node.model_copy(update={"children": _sorted(node.children or [])})
        result.append(node)
    return result


def build_tree(paths: Iterable[str]) -> list[TreeNode]:
    """Build a sorted folder/file tree from a set of paths.

    Each path is split on "/". Intermediate segments become folders and the
    last segment becomes a file. Every level is sorted with folders before
    files and names in case-sensitive lexicographic order.

    Args:
        paths: File paths. Order does not matter; duplicates are ignored.

    Returns:
        The root-level nodes of the tree.

    Raises:
        InvalidPathError: If a path is malformed.
        PathConflictError: If a segment is used both as a file and a folder.
    """
    roots: list[TreeNode] = []
    # path -> node, for every node created so far
    index: dict[str, TreeNode] = {}

    for path in paths:
        segments = split_path(path)
        level = roots
        for depth, segment in enumerate(segments):
            node_path = PATH_SEPARATOR.join(segments[: depth + 1])
            is_last = depth == len(segments) - 1
            node = index.get(node_path)

            if node is None:
                node = TreeNode(
                    name=segment,
                    path=node_path,
                    type="file" if is_last else "folder",
                    children=None if is_last else [],
                )
                index[node_path] = node
                level.append(node)
            elif node.is_folder == is_last:
                raise PathConflictError(node_path, path)

            if not is_last:
                level = node.children

    return _sorted(roots)


def iter_files(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every file node depth-first, in display order."""
    for node in nodes:
        if node.is_folder:
            yield from iter_files(node.children or [])
        else:
            yield node


class ExpansionState:
    """Tracks which folders are expanded in the project explorer.

    Kept separate from the tree so that rebuilding the tree after a VFS change
    does not collapse what the user has open. Folders are collapsed unless
    explicitly expanded.
    """

    def __init__(self, expanded: dict[str, bool] | None = None) -> None:
        self._expanded: dict[str, bool] = dict(expanded or {})

    def is_expanded(self, path: str) -> bool:
        return self._expanded.get(path, False)

    def expand(self, path: str) -> None:
        self._expanded[path] = True

    def collapse(self, path: str) -> None:
        self._expanded[path] = False

    def toggle(self, path: str) -> bool:
        """Flip a folder's state and return the new value."""
        self._expanded[path] = not self.is_expanded(path)
        return self._expanded[path]

    def visible(self, nodes: list[TreeNode], depth: int = 0) -> list[tuple[int, TreeNode]]:
        """Flatten the tree into the rows currently shown.

        Children of a folder are included only when that folder is expanded.

        Args:
            nodes: Nodes at the current level.
            depth: Indentation depth of ``nodes``.

        Returns:
            (depth, node) pairs in display order.
        """
        rows: list[tuple[int, TreeNode]] = []
        for node in nodes:
            rows.append((depth, node))
            if node.is_folder and self.is_expanded(node.path):
                rows.extend(self.visible(node.children or [], depth + 1))
        return rows

    def prune(self, nodes: list[TreeNode]) -> None:
        """Forget entries for folders that are no longer in the tree."""
        folders = set()
        stack = list(nodes)
        while stack:
            node = stack.pop()
            if node.is_folder:
                folders.add(node.path)
                stack.extend(node.children or [])
        self._expanded = {
            path: value for path, value in self._expanded.items() if path in folders
        }
