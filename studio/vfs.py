"""In-memory virtual file system for an editable project.

The VFSStore maps file paths to content and is the single source of truth
for the studio. An entry is either loaded (a string, possibly empty) or a
placeholder (None) whose content has not been fetched from the server yet.

Writes are per key: ``set`` never disturbs sibling entries, so a lazy file
fetch completing in the background cannot clobber unrelated edits. Only
``replace_all`` swaps the whole mapping.
"""

import logging
from typing import Iterable, Iterator, Mapping

from studio.tree import ExpansionState, TreeNode, build_tree


logger = logging.getLogger(__name__)

# Content of an entry that has not been fetched yet
PLACEHOLDER = None


class VFSStore:
    """Mapping of file path to content with explicit placeholders.

    Example:
        store = VFSStore({"App.tsx": "export const App = () => null;"})
        store.add_placeholders(["components/Header.tsx"])
        store.needs_fetch("components/Header.tsx")  # True
        store.set("components/Header.tsx", "export const Header = ...")
    """

    def __init__(self, files: Mapping[str, str | None] | None = None) -> None:
        self._files: dict[str, str | None] = {}
        # path -> latest issued fetch sequence number
        self._requests: dict[str, int] = {}
        self._sequence = 0
        if files:
            self.replace_all(files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def get(self, path: str, default: str | None = None) -> str | None:
        """Return the loaded content for ``path``.

        Returns ``default`` when the path is absent or still a placeholder.
        Use ``is_loaded`` to tell a placeholder from a loaded empty file.
        """
        content = self._files.get(path)
        return default if content is None else content

    def is_loaded(self, path: str) -> bool:
        return self._files.get(path) is not None

    def needs_fetch(self, path: str) -> bool:
        """True when the path is absent or only a placeholder."""
        return not self.is_loaded(path)

    def check_path(self, path: str) -> None:
        """Check that ``path`` can be written without breaking the tree.

        Raises:
            InvalidPathError: If the path is malformed.
            PathConflictError: If a new path clashes with an existing file
                or folder.
        """
        if path not in self._files:
            build_tree([*self._files, path])

    def set(self, path: str, content: str) -> None:
        """Write one file. Other entries are left untouched.

        A fetch of ``path`` still in flight becomes stale, so it cannot
        overwrite this write when it completes.

        Raises:
            InvalidPathError: If the path is malformed.
            PathConflictError: If a new path clashes with an existing file
                or folder.
        """
        if not isinstance(content, str):
            raise TypeError(f"File content must be str, got {type(content).__name__}")
        self.check_path(path)
        self._files[path] = content
        self._requests.pop(path, None)

    def remove(self, path: str) -> None:
        """Delete one entry.

        Raises:
            KeyError: If the path is not in the store.
        """
        del self._files[path]
        self._requests.pop(path, None)

    def replace_all(self, files: Mapping[str, str | None]) -> None:
        """Replace the whole mapping.

        Used when a project is loaded or a generation result is applied.
        Every path is validated before anything changes, so an invalid
        mapping leaves the store as it was.

        Raises:
            InvalidPathError: If a path is malformed.
            PathConflictError: If a name is used both as a file and a folder.
            TypeError: If a value is neither str nor None.
        """
        for path, content in files.items():
            if content is not None and not isinstance(content, str):
                raise TypeError(
                    f"File content for {path!r} must be str or None, "
                    f"got {type(content).__name__}"
                )
        build_tree(files)
        self._files = dict(files)
        self._requests.clear()
        logger.debug(f"VFS replaced with {len(self._files)} entries")

    def add_placeholders(self, paths: Iterable[str]) -> list[str]:
        """Add placeholder entries for paths that are not already present.

        Existing entries, loaded or not, are never overwritten.

        Returns:
            The paths that were added.
        """
        paths = list(paths)
        build_tree([*self._files, *paths])
        added = []
        for path in paths:
            if path not in self._files:
                self._files[path] = PLACEHOLDER
                added.append(path)
        return added

    def paths(self) -> list[str]:
        return list(self._files)

    def loaded_files(self) -> dict[str, str]:
        """Return a copy of every loaded entry, skipping placeholders."""
        return {path: content for path, content in self._files.items() if content is not None}

    def snapshot(self) -> dict[str, str | None]:
        """Return a copy of the full mapping, placeholders included."""
        return dict(self._files)

    def tree(self) -> list[TreeNode]:
        return build_tree(self._files)

    def visible_rows(self, expansion: ExpansionState) -> list[tuple[int, TreeNode]]:
        return expansion.visible(self.tree())

    # Stale response protection for lazy fetches

    def next_request(self, path: str) -> int:
        """Issue a sequence number for a new fetch of ``path``."""
        self._sequence += 1
        self._requests[path] = self._sequence
        return self._sequence

    def is_current(self, path: str, sequence: int) -> bool:
        return self._requests.get(path) == sequence

    def set_if_current(self, path: str, content: str, sequence: int) -> bool:
        """Write a fetched file only if no newer fetch was issued for it.

        Args:
            path: The file path.
            content: The fetched content.
            sequence: The number returned by ``next_request`` for this fetch.

        Returns:
            True if the content was written, False if it was stale.
        """
        if not self.is_current(path, sequence):
            logger.debug(f"Discarding stale content for {path} (request {sequence})")
            return False
        self.set(path, content)
        return True
