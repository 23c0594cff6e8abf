"""Process control and small XML and text helpers."""

from __future__ import annotations

import os
import shlex
import signal
import string
import subprocess
import xml.etree.ElementTree as ET
from os import PathLike

_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_children: dict[int, subprocess.Popen] = {}


def execute_app(filename: str | PathLike, parameters: str) -> int:
    """Start ``filename`` with shell-style ``parameters`` and return its process id."""
    process = subprocess.Popen([os.fspath(filename), *shlex.split(parameters)])
    _children[process.pid] = process
    return process.pid


def kill_app(pid: int) -> None:
    """Terminate a process; processes started here are also reaped."""
    process = _children.pop(pid, None)
    if process is not None:
        process.terminate()
        process.wait()
    else:
        os.kill(pid, signal.SIGTERM)


def get_attribute(element: ET.Element | None, name: str) -> str:
    """Return an attribute's value, or an empty string when absent."""
    if element is None:
        return ""
    return element.get(name, "")


def get_element_text(element: ET.Element) -> str:
    """Return the leading text of an element."""
    if element.text is None:
        raise ValueError(f"element <{element.tag}> has no text")
    return element.text


def extract_base_id(filename: str | PathLike) -> str:
    """Return the ``id`` of the root ``ncl`` element of a document, or ''."""
    if not os.fspath(filename):
        return ""
    try:
        root = ET.parse(filename).getroot()
    except (OSError, ET.ParseError):
        return ""
    if root.tag.rpartition("}")[2] != "ncl":
        return ""
    return get_attribute(root, "id")


def upper_case(text: str) -> str:
    """Upper-case ASCII letters only, leaving every other character alone."""
    return text.translate(_UPPER)