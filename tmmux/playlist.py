"""Playlist documents for the multiplexer and the process that transmits them."""

from __future__ import annotations

import subprocess
import uuid as uuidlib
import xml.etree.ElementTree as ET
from os import PathLike, fspath
from pathlib import Path

MUXER_PROGRAM = "tm-muxer.exe"

AV_COLUMNS = ("id", "pid", "src")


class PlaylistError(ValueError):
    """Raised when a playlist document cannot be read."""


def search_elements(
    parent: ET.Element, tagname: str, attr_filter: dict[str, str]
) -> list[ET.Element]:
    """Return the descendants of ``parent`` named ``tagname`` whose attributes match the filter.

    A missing attribute compares as the empty string.
    """
    return [
        element
        for element in parent.iter(tagname)
        if element is not parent
        and all(element.get(name, "") == value for name, value in attr_filter.items())
    ]


def _new_uuid() -> str:
    return "{" + str(uuidlib.uuid4()) + "}"


class Playlist:
    """Items to transmit in turn, each with its audio/video streams and a carousel.

    Streams and carousels are indexed by the uuid of the item they belong to.
    """

    def __init__(self) -> None:
        self.filename: str = ""
        self.items: list[dict[str, str]] = []
        self.avs: dict[str, list[dict[str, str]]] = {}
        self.carousels: dict[str, list[dict[str, str]]] = {}
        self.output: dict[str, str] = {}
        self.current_uuid: str = ""
        self.current_index: int = -1

    @property
    def current_item(self) -> dict[str, str] | None:
        """The selected item, or None when nothing is selected."""
        if not self.current_uuid:
            return None
        return self.items[self.current_index]

    @property
    def current_avs(self) -> list[dict[str, str]]:
        return self.avs.get(self.current_uuid, [])

    @property
    def current_carousel(self) -> dict[str, str] | None:
        """The selected item's carousel; only one per item is supported."""
        carousels = self.carousels.get(self.current_uuid)
        return carousels[0] if carousels else None

    def load(self, path: str | PathLike) -> None:
        """Replace the contents with those of a playlist document."""
        self.items.clear()
        self.avs.clear()
        self.carousels.clear()
        self.filename = fspath(path)
        try:
            root = ET.parse(path).getroot()
        except (OSError, ET.ParseError) as exc:
            raise PlaylistError(f"cannot read playlist {self.filename!r}") from exc

        output = next(root.iter("output"), None)
        if output is not None:
            self.output.update(output.attrib)

        for element in root.iter("item"):
            item = {
                "uuid": _new_uuid(),
                "dur": element.get("dur", ""),
                "name": element.get("name", ""),
            }
            self.items.append(item)
            for child in element:
                if child.tag == "pmtref" and self._load_pmt(root, child, item["uuid"]):
                    # Only one program map per item is supported.
                    break

    def _load_pmt(self, root: ET.Element, pmtref: ET.Element, item_uuid: str) -> bool:
        pmts = search_elements(root, "pmt", {"id": pmtref.get("pmtid", "")})
        if not pmts:
            return False
        attrs: dict[str, str] = {}
        for es in search_elements(pmts[0], "es", {}):
            attrs = {"id": es.get("refid", "")}
            streams = search_elements(root, "av", attrs)
            if streams:
                self.avs.setdefault(item_uuid, []).append(dict(streams[0].attrib))
        # The carousel is looked up by the last stream reference of the map.
        carousels = search_elements(root, "carousel", attrs)
        carousel = dict(carousels[0].attrib) if carousels else {}
        self.carousels.setdefault(item_uuid, []).append(carousel)
        return True

    def save(self, path: str | PathLike) -> None:
        """Write the playlist as a document that ``load`` and the multiplexer read."""
        root = ET.Element("tmm")
        ET.SubElement(root, "head")
        body = ET.SubElement(root, "body")
        inputs = ET.SubElement(body, "inputs")
        output = ET.SubElement(
            body,
            "output",
            dest=self.output.get("dest", ""),
            bitrate=self.output.get("bitrate", ""),
        )

        for number, item in enumerate(self.items):
            item_element = ET.SubElement(
                output, "item", name=item.get("name", ""), dur=item.get("dur", "")
            )
            pmt_id = f"pmt{number}"
            ET.SubElement(item_element, "pmtref", pmtid=pmt_id)
            pmt = ET.SubElement(inputs, "pmt", id=pmt_id)

            for av in self.avs.get(item["uuid"], []):
                ET.SubElement(pmt, "es", refid=av.get("id", ""))
                ET.SubElement(
                    inputs,
                    "av",
                    id=av.get("id", ""),
                    src=av.get("src", ""),
                    pid=av.get("pid", ""),
                )

            carousel_id = f"carousel{number}"
            for carousel in self.carousels.get(item["uuid"], []):
                ET.SubElement(pmt, "es", refid=carousel_id)
                ET.SubElement(
                    inputs,
                    "carousel",
                    id=carousel_id,
                    src=carousel.get("src", ""),
                    bitrate=carousel.get("bitrate", ""),
                )

        tree = ET.ElementTree(root)
        ET.indent(tree)
        Path(path).write_text(ET.tostring(root, encoding="unicode") + "\n", encoding="utf-8")

    def create_item(self) -> str:
        """Append a new item with an empty carousel, select it and return its uuid."""
        item_uuid = _new_uuid()
        self.items.append({"uuid": item_uuid, "dur": "5", "name": "New item ..."})
        self.carousels.setdefault(item_uuid, []).append({})
        self.select_item(item_uuid)
        return item_uuid

    def remove_item(self, row: int) -> None:
        """Remove the item at ``row``; the selection is cleared once none are left."""
        item = self.items.pop(row)
        self.avs.pop(item["uuid"], None)
        self.carousels.pop(item["uuid"], None)
        if not self.items:
            self.select_item("")

    def select_item(self, uuid: str) -> bool:
        """Select the item with ``uuid``; clear the selection and return False if absent."""
        for index, item in enumerate(self.items):
            if item["uuid"] == uuid:
                self.current_uuid = uuid
                self.current_index = index
                return True
        self.current_uuid = ""
        return False

    def create_av(self) -> dict[str, str]:
        """Add a placeholder stream to the selected item and return it."""
        av = {"id": "new id", "src": "...", "pid": "1001"}
        self.avs.setdefault(self.current_uuid, []).append(av)
        return av

    def remove_av(self, row: int) -> None:
        """Remove the selected item's stream at ``row``."""
        streams = self.avs.setdefault(self.current_uuid, [])
        streams.pop(row)

    def set_av_field(self, row: int, column: int, value: str) -> None:
        """Edit a stream of the selected item: column 0 is id, 1 pid, 2 src."""
        if self.current_uuid not in self.avs or not 0 <= column < len(AV_COLUMNS):
            return
        self.avs[self.current_uuid][row][AV_COLUMNS[column]] = value

    def _selected(self) -> dict[str, str]:
        item = self.current_item
        if item is None:
            raise LookupError("no playlist item is selected")
        return item

    def _selected_carousel(self) -> dict[str, str]:
        self._selected()
        carousel = self.current_carousel
        if carousel is None:
            raise LookupError("the selected item has no carousel")
        return carousel

    def set_item_name(self, name: str) -> None:
        self._selected()["name"] = name

    def set_item_duration(self, duration: str) -> None:
        self._selected()["dur"] = str(duration)

    def set_carousel_path(self, path: str) -> None:
        self._selected_carousel()["src"] = path

    def set_carousel_bitrate(self, bitrate: str) -> None:
        self._selected_carousel()["bitrate"] = str(bitrate)


class Transmission:
    """Runs the multiplexer on a playlist file."""

    def __init__(self, program: str | PathLike = MUXER_PROGRAM) -> None:
        self.program = fspath(program)
        self._process: subprocess.Popen | None = None

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    @property
    def returncode(self) -> int | None:
        return None if self._process is None else self._process.returncode

    def start(self, playlist_file: str | PathLike) -> None:
        """Start transmitting ``playlist_file``."""
        if self.running:
            raise RuntimeError("a transmission is already running")
        self._process = subprocess.Popen([self.program, fspath(playlist_file)])

    def stop(self) -> None:
        """Kill the running transmission, if any."""
        if self._process is None:
            return
        if self._process.poll() is None:
            self._process.kill()
        self._process.wait()