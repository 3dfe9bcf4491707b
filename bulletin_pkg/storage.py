"""
Storage backends used by the build pipeline.

The generator never touches the file system directly; it goes through one of
these objects so that a build can run against a real directory tree or an
in-memory one.
"""

import os
import shutil
import posixpath
from typing import Dict, List


class Storage:
    """Minimal file storage interface."""

    def list_dir(self, path: str) -> List[str]:
        raise NotImplementedError

    def is_file(self, path: str) -> bool:
        raise NotImplementedError

    def read_text(self, path: str) -> str:
        raise NotImplementedError

    def write_text(self, path: str, content: str) -> None:
        raise NotImplementedError

    def ensure_dir(self, path: str) -> None:
        raise NotImplementedError

    def remove_file(self, path: str) -> None:
        raise NotImplementedError

    def remove_tree(self, path: str) -> None:
        raise NotImplementedError


class LocalStorage(Storage):
    """Storage backed by the local file system."""

    def list_dir(self, path):
        return sorted(os.listdir(path))

    def is_file(self, path):
        return os.path.isfile(path)

    def read_text(self, path):
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def write_text(self, path, content):
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)

    def ensure_dir(self, path):
        os.makedirs(path, exist_ok=True)

    def remove_file(self, path):
        os.remove(path)

    def remove_tree(self, path):
        shutil.rmtree(path, ignore_errors=True)


class MemoryStorage(Storage):
    """In-memory storage keyed by normalized POSIX paths."""

    def __init__(self, files: Dict[str, str] = None):
        self.files = {}
        self.dirs = set()
        for path, content in (files or {}).items():
            self.write_text(path, content)

    @staticmethod
    def _norm(path):
        return posixpath.normpath(path)

    def _add_parents(self, path):
        parent = posixpath.dirname(path)
        while parent and parent not in self.dirs:
            self.dirs.add(parent)
            parent = posixpath.dirname(parent)

    def list_dir(self, path):
        path = self._norm(path)
        if path not in self.dirs:
            raise FileNotFoundError(f"No such directory: {path}")
        names = set()
        for entry in list(self.files) + list(self.dirs):
            if posixpath.dirname(entry) == path:
                names.add(posixpath.basename(entry))
        return sorted(names)

    def is_file(self, path):
        return self._norm(path) in self.files

    def read_text(self, path):
        path = self._norm(path)
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(f"No such file: {path}")

    def write_text(self, path, content):
        path = self._norm(path)
        self._add_parents(path)
        self.files[path] = content

    def ensure_dir(self, path):
        path = self._norm(path)
        self.dirs.add(path)
        self._add_parents(path)

    def remove_file(self, path):
        path = self._norm(path)
        if path not in self.files:
            raise FileNotFoundError(f"No such file: {path}")
        del self.files[path]

    def remove_tree(self, path):
        path = self._norm(path)
        prefix = path + '/'
        self.files = {p: c for p, c in self.files.items() if not p.startswith(prefix)}
        self.dirs = {d for d in self.dirs if d != path and not d.startswith(prefix)}
