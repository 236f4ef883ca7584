"""
=============================================================================
UPLOADED FILES NORMALIZATION
=============================================================================

A multipart parser (not part of this package) describes every uploaded
file with five fields:

    {"name": "a.png", "tmp_name": "/tmp/x1", "type": "image/png",
     "size": 1024, "error": 0}

Form fields such as ``photos[]`` or ``docs[cv][pdf]`` arrive in one of
two shapes, and both are normalized into the same tree:

    ┌──────────────────────────────────────────────────────────────────────┐
    │   NESTED (one entry per leaf)       PARALLEL (lists per field)       │
    │                                                                      │
    │   {"photos": [                     {"photos": {                      │
    │       {"name": "a", ...},              "name":     ["a", "b"],       │
    │       {"name": "b", ...},              "tmp_name": ["/x", "/y"],     │
    │   ]}                                   ...                           │
    │                                    }}                                │
    │                     \\                 /                              │
    │                      {"photos": [UploadedFile, UploadedFile]}        │
    └──────────────────────────────────────────────────────────────────────┘

UploadedFile instances already in the input are kept as they are.

=============================================================================
"""

from typing import Any, Dict, List, Mapping, Optional, Union

from ..http.uploaded_file import UploadedFile, UploadNode


_FIELDS = ("name", "tmp_name", "type", "size", "error")


def make_uploaded_files(files: Optional[Mapping[Any, Any]] = None) -> Dict[Any, UploadNode]:
    """
    Normalize a files specification into an UploadNode tree.

    Raises:
        ValueError: If an entry is neither an UploadedFile, a file entry
                    nor a container of those.
    """
    if files is None:
        return {}
    return _normalize(files)


def _normalize(files: Union[Mapping[Any, Any], List[Any]]) -> Any:
    items = files.items() if isinstance(files, Mapping) else enumerate(files)
    normalized: Dict[Any, Any] = {}
    for key, value in items:
        if isinstance(value, UploadedFile):
            normalized[key] = value
        elif isinstance(value, Mapping) and value.get("tmp_name") is not None:
            normalized[key] = _build(value)
        elif isinstance(value, (Mapping, list)):
            normalized[key] = _normalize(value)
        else:
            raise ValueError("Invalid value in files specification.")
    if isinstance(files, list):
        return [normalized[index] for index in range(len(files))]
    return normalized


def _build(entry: Mapping[str, Any]) -> Any:
    temp_name = entry["tmp_name"]
    if isinstance(temp_name, (Mapping, list)):
        return _build_parallel(entry)
    return UploadedFile(
        entry.get("name"),
        temp_name,
        entry.get("type"),
        entry.get("size"),
        entry.get("error"),
    )


def _build_parallel(entry: Mapping[str, Any]) -> Any:
    temp_names = entry["tmp_name"]
    keys = temp_names.keys() if isinstance(temp_names, Mapping) else range(len(temp_names))

    normalized: Dict[Any, Any] = {}
    for key in keys:
        leaf = {}
        for field in _FIELDS:
            column = entry.get(field)
            leaf[field] = None if column is None else column[key]
        normalized[key] = _build(leaf)

    if isinstance(temp_names, list):
        return [normalized[index] for index in range(len(temp_names))]
    return normalized
