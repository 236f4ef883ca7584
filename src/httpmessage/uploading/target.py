"""
Upload target: the name a relocated file gets in the target directory.
"""

from typing import Any


class UploadTarget:
    """
    A validated, non-empty target name.

        target = UploadTarget("avatar.png")
        str(target)        # "avatar.png"
    """

    def __init__(self, target: str):
        self._target = ""
        self.set(target)

    def set(self, target: Any) -> None:
        """Replace the target name."""
        if not isinstance(target, str) or not target:
            raise ValueError("Invalid target provided. Must be a non-empty string.")
        self._target = target

    def get(self) -> str:
        return self._target

    def __str__(self) -> str:
        return self._target

    def __repr__(self) -> str:
        return f"UploadTarget({self._target!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UploadTarget):
            return NotImplemented
        return self._target == other._target

    def __hash__(self) -> int:
        return hash(self._target)
