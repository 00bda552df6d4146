"""
Runtime configuration for embedpack.

Holds the mode switch that decides whether an embedded filesystem serves
its packed records or passes every call through to a real directory.
One switch is created per generated module and shared by reference with
its EmbedFS, so flipping it redirects all lookups without touching call
sites.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field

from embedpack.storage.schema import InvalidArgumentError

# Environment variable consulted by generated modules at import time.
LOCAL_ENV_VAR = "EMBEDPACK_LOCAL"


@dataclass
class ModeSnapshot:
    """Consistent view of a ModeSwitch at one point in time."""

    local: bool
    root: str


@dataclass
class ModeSwitch:
    """
    Local/embedded mode toggle.

    Attributes:
        root: Directory served in local mode; empty means embedded mode
    """

    root: str = ""
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.root, str):
            raise InvalidArgumentError(
                f"Local root must be a string, got {type(self.root).__name__}"
            )

    @classmethod
    def from_env(cls, default: str = "", var: str = LOCAL_ENV_VAR) -> "ModeSwitch":
        """
        Create a switch, letting an environment variable override the default.

        If ``var`` is set its value is used as the local root, and an empty
        value forces embedded mode. If it is unset ``default`` applies.
        """
        return cls(os.environ.get(var, default))

    @property
    def local(self) -> bool:
        """True when lookups go to the local filesystem."""
        return self.snapshot().local

    def set_local(self, root: str) -> None:
        """
        Switch to local mode rooted at ``root``, or back to embedded mode.

        Args:
            root: Directory to serve from, or "" to use the embedded data
        """
        if not isinstance(root, str):
            raise InvalidArgumentError(
                f"Local root must be a string, got {type(root).__name__}"
            )
        with self._lock:
            self.root = root

    def snapshot(self) -> ModeSnapshot:
        """Read mode and root together."""
        with self._lock:
            root = self.root
        return ModeSnapshot(local=bool(root), root=root)
