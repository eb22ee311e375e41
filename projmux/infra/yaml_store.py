"""
YAML file persistence for projmux.

Provides:
- Reads that raise a typed ConfigIOError naming the file
- Atomic writes (write to temp, then rename)
- Automatic parent directory creation
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Union
import logging

import yaml

from ..exit_codes import ConfigIOError

logger = logging.getLogger(__name__)


class YamlStore:
    """
    YAML file persistence with atomic writes.

    Example:
        store = YamlStore()
        data = store.read(Path("~/.config/projmux/projects.yml"))
        data["include"].append({"remote": "git@github.com:me/new.git"})
        store.write_text(path, store.dumps(data))
    """

    def read_text(self, path: Union[str, Path]) -> str:
        """
        Read a file as text.

        Raises:
            ConfigIOError: if the file is missing or unreadable
        """
        path = Path(path)
        try:
            with open(path, 'r') as f:
                return f.read()
        except FileNotFoundError as e:
            raise ConfigIOError("file does not exist", str(path)) from e
        except OSError as e:
            raise ConfigIOError(f"could not read file: {e.strerror or e}", str(path)) from e

    def read(self, path: Union[str, Path]) -> Any:
        """
        Read and parse a YAML file.

        Returns:
            Parsed document (None for an empty file)

        Raises:
            ConfigIOError: if the file is missing, unreadable or malformed
        """
        text = self.read_text(path)
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigIOError(f"malformed YAML: {e}", str(path)) from e

    def dumps(self, data: Any) -> str:
        """Render data as stored: block style, insertion order."""
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def write_text(self, path: Union[str, Path], text: str) -> None:
        """Write text atomically using temp file and rename."""
        path = Path(path)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file in same directory
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w') as f:
                f.write(text)

            # Atomic rename
            os.replace(temp_path, path)

        except Exception:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

        logger.info(f"wrote {path}")
