import os
import sys
import time
import xml.etree.ElementTree as ET

import pytest

from tmmux.library import (
    execute_app,
    extract_base_id,
    get_attribute,
    get_element_text,
    kill_app,
    upper_case,
)


def test_get_attribute():
    element = ET.fromstring('<media id="video1" src="a.ts"/>')
    assert get_attribute(element, "src") == "a.ts"
    assert get_attribute(element, "missing") == ""
    assert get_attribute(None, "src") == ""


def test_get_element_text():
    element = ET.fromstring("<name>channel</name>")
    assert get_element_text(element) == "channel"


def test_get_element_text_without_text():
    with pytest.raises(ValueError):
        get_element_text(ET.fromstring("<name/>"))


def test_extract_base_id(tmp_path):
    path = tmp_path / "main.ncl"
    path.write_text('<ncl id="mainDoc"><head/><body/></ncl>')
    assert extract_base_id(path) == "mainDoc"


def test_extract_base_id_with_namespace(tmp_path):
    path = tmp_path / "ns.ncl"
    path.write_text('<ncl id="nsDoc" xmlns="urn:example:ncl"><body/></ncl>')
    assert extract_base_id(path) == "nsDoc"


def test_extract_base_id_failures(tmp_path):
    other = tmp_path / "other.xml"
    other.write_text('<doc id="x"/>')
    broken = tmp_path / "broken.xml"
    broken.write_text("<ncl id=")
    assert extract_base_id(other) == ""
    assert extract_base_id(broken) == ""
    assert extract_base_id(tmp_path / "absent.ncl") == ""
    assert extract_base_id("") == ""


def test_upper_case_only_ascii():
    assert upper_case("abc1é") == "ABC1é"
    assert upper_case("Mixed-Case") == "MIXED-CASE"


def test_execute_app_passes_parameters(tmp_path):
    script = tmp_path / "echo_args.py"
    out = tmp_path / "out.txt"
    script.write_text(
        "import os, sys\n"
        "tmp = sys.argv[1] + '.tmp'\n"
        "open(tmp, 'w').write('|'.join(sys.argv[2:]))\n"
        "os.replace(tmp, sys.argv[1])\n"
    )
    pid = execute_app(sys.executable, f'{script} {out} "two words" last')
    assert pid > 0
    deadline = time.monotonic() + 20
    while not out.exists() and time.monotonic() < deadline:
        time.sleep(0.05)
    assert out.read_text() == "two words|last"
    kill_app(pid)


def test_kill_app_terminates_and_reaps():
    pid = execute_app(sys.executable, '-c "import time; time.sleep(60)"')
    kill_app(pid)
    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)


def test_execute_missing_program(tmp_path):
    with pytest.raises(FileNotFoundError):
        execute_app(tmp_path / "no-such-program", "")