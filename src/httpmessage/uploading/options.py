"""
Upload options: a small, ordered configuration bag handed to strategies.

Each strategy picks the keys it understands and ignores the rest, so one
bag can configure a whole pipeline:

    options = UploadOptions({
        "target_directory": "/var/uploads",
        "dir_permissions": 0o750,
        "file_permissions": 0o640,
    })
"""

from collections.abc import Iterable, Mapping, MutableMapping
from types import SimpleNamespace
from typing import Any, Dict, Iterator, Union


OptionKey = Union[str, int]


class UploadOptions(MutableMapping):
    """
    Ordered mapping of option names to values.

    Built from a mapping, an iterable of (name, value) pairs or a
    SimpleNamespace. Behaves like a dict otherwise.
    """

    def __init__(self, options: Any):
        if isinstance(options, Mapping):
            self._options: Dict[OptionKey, Any] = dict(options)
        elif isinstance(options, SimpleNamespace):
            self._options = dict(vars(options))
        elif isinstance(options, Iterable) and not isinstance(options, (str, bytes)):
            try:
                self._options = dict(options)
            except (TypeError, ValueError) as e:
                raise TypeError(
                    "Invalid options provided; an iterable must yield (name, value) pairs."
                ) from e
        else:
            raise TypeError(
                f"Invalid options provided; must be a mapping, an iterable of pairs, "
                f'or a SimpleNamespace, "{type(options).__name__}" received.'
            )

    def get_array_copy(self) -> Dict[OptionKey, Any]:
        """Return a plain dict copy of the options."""
        return dict(self._options)

    def set(self, name: OptionKey, value: Any) -> None:
        self._options[name] = value

    def add(self, options: Mapping) -> None:
        """Merge ``options`` in; existing names are overwritten."""
        self._options.update(options)

    # MutableMapping protocol

    def __getitem__(self, name: OptionKey) -> Any:
        return self._options[name]

    def __setitem__(self, name: OptionKey, value: Any) -> None:
        self._options[name] = value

    def __delitem__(self, name: OptionKey) -> None:
        del self._options[name]

    def __iter__(self) -> Iterator[OptionKey]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self) -> str:
        return f"UploadOptions({self._options!r})"
