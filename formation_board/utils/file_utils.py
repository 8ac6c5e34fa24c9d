"""
File name helpers for the Formation Board application.
"""
import os


def is_bare_filename(filename) -> bool:
    """
    Check that a name refers to a file directly inside the data directory.

    Example:
        >>> is_bare_filename("formation-1.json")
        True
        >>> is_bare_filename("../formations.json")
        False
    """
    if not isinstance(filename, str) or filename in ("", ".", ".."):
        return False
    if "/" in filename or "\\" in filename or "\x00" in filename:
        return False
    return os.path.basename(filename) == filename
