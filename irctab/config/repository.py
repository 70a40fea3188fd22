from __future__ import annotations

import json
import os
from typing import Any

from ..errors.internal import ConfigError


class ConfigRepository:
    """Reads the JSON configuration file.

    The decoded mapping is cached and served again while the file's
    (mtime, size) stamp is unchanged.
    """

    def __init__(self, path: str | os.PathLike[str]):
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)
        self._stamp: tuple[float, int] | None = None
        self._cached: dict[str, Any] | None = None

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def load_raw(self) -> dict[str, Any]:
        """Return the top-level JSON object, or ``{}`` when there is no file.

        Raises:
            ConfigError: The file is unreadable, not JSON, or not an object.
        """
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise ConfigError(str(e), data={"path": self.path}) from e

        stamp = (st.st_mtime, st.st_size)
        if self._cached is not None and self._stamp == stamp:
            return self._cached

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            raise ConfigError(f"invalid JSON: {e}", data={"path": self.path}) from e
        except OSError as e:
            raise ConfigError(str(e), data={"path": self.path}) from e

        if not isinstance(data, dict):
            raise ConfigError(
                "expected a JSON object at top level", data={"path": self.path}
            )
        self._cached = data
        self._stamp = stamp
        return data
