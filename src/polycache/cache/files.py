# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Local-disk FileHandle implementation."""

from __future__ import annotations

from pathlib import Path


class LocalFile:
    """FileHandle over one path on the local filesystem.

    Operations on a file that another process already removed are no-ops
    (``delete``, ``rename``) or report absence (``get_content`` -> None).
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def create(self) -> None:
        self._path.touch(exist_ok=True)

    def append(self, data: bytes) -> None:
        with self._path.open("ab") as f:
            f.write(data)

    def get_content(self) -> bytes | None:
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None

    def delete(self) -> None:
        self._path.unlink(missing_ok=True)

    def rename(self, new_name: str) -> None:
        """Rename within the same directory; the handle follows the file."""
        target = self._path.with_name(new_name)
        try:
            self._path.replace(target)
        except FileNotFoundError:
            return
        self._path = target

    def get_name(self) -> str:
        return self._path.name

    def __repr__(self) -> str:
        return f"LocalFile({str(self._path)!r})"
