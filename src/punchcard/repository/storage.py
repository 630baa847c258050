# SPDX-License-Identifier: MIT

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from punchcard import configuration
from punchcard.errors import ConfigurationMissing, DecodeFailure, IOFailure

logger = logging.getLogger(__name__)


class StorageFolder:
    """
    The user-chosen shared folder every device reads from and writes to.

    Nothing is coordinated between devices beyond what the files themselves
    say, so the folder only knows its own layout.
    """

    def __init__(self, root: Optional[Path] = None) -> None:
        self._root: Optional[Path] = None
        if root is not None:
            self.set_root(root)

    @property
    def root(self) -> Optional[Path]:
        return self._root

    @property
    def is_configured(self) -> bool:
        return self._root is not None

    def require_root(self) -> Path:
        if self._root is None:
            raise ConfigurationMissing()
        return self._root

    def set_root(self, root: Path) -> None:
        root = root.expanduser()
        self.__create_folder_structure(root)
        self._root = root
        logger.debug("storage folder set to %s", root)

    def clear_root(self) -> None:
        self._root = None

    @property
    def config_path(self) -> Path:
        return self.require_root() / configuration.CONFIG_FILE_NAME

    @property
    def entries_path(self) -> Path:
        return (
            self.require_root()
            / configuration.ENTRIES_DIR_NAME
            / configuration.ENTRIES_FILE_NAME
        )

    @property
    def timesheets_dir(self) -> Path:
        return self.require_root() / configuration.TIMESHEETS_DIR_NAME

    def __create_folder_structure(self, root: Path) -> None:
        try:
            root.mkdir(parents=True, exist_ok=True)
            (root / configuration.TIMESHEETS_DIR_NAME).mkdir(exist_ok=True)
            (root / configuration.ENTRIES_DIR_NAME).mkdir(exist_ok=True)
        except PermissionError as e:
            raise IOFailure(f"Storage folder is not writable: {root}", e) from e
        except OSError as e:
            raise IOFailure(f"Could not create storage folder {root}: {e}", e) from e


def is_valid_storage_folder(path: Path) -> bool:
    """
    A folder is usable when it is (or can be created as) a writable
    directory.
    """
    path = path.expanduser()
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
            return True
        except OSError:
            return False
    return path.is_dir() and os.access(path, os.W_OK)


def read_json_document(path: Path) -> Optional[Any]:
    """
    Read and parse a JSON file. Returns None if the file does not exist.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except PermissionError as e:
        raise IOFailure(f"Permission denied reading {path}", e) from e
    except OSError as e:
        raise IOFailure(f"Could not read {path}: {e}", e) from e

    try:
        return json.loads(text)
    except ValueError as e:
        raise DecodeFailure(f"Stored data in {path} is not valid JSON: {e}", e) from e


def write_json_document(path: Path, document: Any) -> None:
    """
    Replace the file in one step so readers, and the sync provider, only
    ever see the previous or the new document in full.
    """
    text = json.dumps(document, indent=2, sort_keys=True, ensure_ascii=False)
    tmp_name: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text + "\n")
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except PermissionError as e:
        raise IOFailure(f"Storage folder is not writable: {path.parent}", e) from e
    except OSError as e:
        raise IOFailure(f"Could not write {path}: {e}", e) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)
