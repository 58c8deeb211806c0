"""Local destination names for received files."""

import os
import time


def file_extension(file_name: str) -> str:
    """
    Return the extension of the last path component, dot included.

    The sender's directories never contribute: "a.b/c" has no extension.
    """
    base = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    if dot < 0:
        return ""
    return base[dot:]


def destination_name(file_name: str, now: float | None = None) -> str:
    """Unix timestamp in seconds followed by the sender's extension."""
    if now is None:
        now = time.time()
    return f"{int(now)}{file_extension(file_name)}"


def destination_path(
    file_name: str,
    save_dir: str,
    unique: bool = False,
    now: float | None = None,
) -> str:
    """
    Full path the incoming content is written to.

    With unique=True an existing file is kept and a " (n)" suffix is
    added before the extension; otherwise a same-second transfer with the
    same extension overwrites the earlier file.
    """
    name = destination_name(file_name, now)
    path = os.path.join(save_dir, name)
    if not unique:
        return path

    ext = file_extension(file_name)
    stem = name[: len(name) - len(ext)]
    counter = 1
    while os.path.exists(path):
        path = os.path.join(save_dir, f"{stem} ({counter}){ext}")
        counter += 1
    return path
