# tmmux

Helpers for an MPEG-2 transport stream multiplexer, written in plain
Python with no third-party dependencies.

## Modules

- `tmmux.stream`: `Stream`, `Buffer` and `Chunk`. A `Stream` keeps a queue
  of `Buffer`s. `get_buffer()` returns the next `Chunk`, which is at most
  `max_bitrate // 8` bytes of the head buffer, with `start_indicator` set
  when the chunk begins a buffer. It returns `None` when the queue is
  empty. `dispose_buffer()` marks that chunk as sent and returns `True`
  once a whole buffer is finished. `next_send` and `period` count 27 MHz
  clock ticks. `initiate_next_send(stc)` sets the first send time, and
  `update_next_send(stc)` moves it on by one period.
- `tmmux.rawstream`: `RawStream`, a section carousel. Its default maximum
  bitrate is 30000. It cycles through its blocks to fill its queue.
  `add_block`, `add_section` (bytes, or an object with `to_bytes()`) and
  `add_sections_from_file` add blocks. The last of these splits a file of
  concatenated sections using each section's 12-bit length field and
  raises `ValueError` on a truncated section. With providers registered
  through `add_provider`, an empty queue is refilled from what the
  providers return for the current clock value.
- `tmmux.library`: `execute_app(filename, parameters)` starts a program
  and returns its process id. `kill_app(pid)` terminates it.
  `get_attribute`, `get_element_text` and `extract_base_id` read
  `xml.etree` elements and documents. `extract_base_id` returns the `id`
  of a root `ncl` element, or `''`. `upper_case` upper-cases ASCII letters
  only.
- `tmmux.treemodel`: `TreeItem`, `ModelIndex`, `TreeModel` and `ItemFlag`.
  A `TreeModel` is an editable tree of rows and columns built from
  space-indented, tab-separated text. Listeners in `data_changed` and
  `header_data_changed` are called on edits. Out-of-range edits raise
  `IndexError`.
- `tmmux.pipe`: `Pipe`, a named FIFO. `create()` makes the pipe and opens
  it for writing, blocking until a reader connects. `open()` opens it for
  reading. It works as a context manager.
- `tmmux.playlist`: `Playlist` loads, edits and saves playlist documents.
  A document is a `tmm` root with `inputs` (`pmt`, `es`, `av`,
  `carousel`) and an `output` holding `item`s. `load` raises
  `PlaylistError` for unreadable files. Each item gets a fresh uuid. The
  setters act on the item chosen with `select_item` and raise
  `LookupError` when none is selected. `Transmission` starts and kills a
  multiplexer program, `tm-muxer.exe` by default, on a playlist file.
  `search_elements` finds descendant elements by tag and attribute values.
- `tmmux.sharedmemory`: `SharedMemory`, a one-slot mailbox in a named
  shared-memory block. It holds a control byte, a 4-byte size and up to
  128 KiB of payload. The side that calls `create()` holds the block
  first. `grant_access_to_foreign()` hands it to the side that called
  `open()`. `read` and `write` raise `NotOwnerError` when the other side
  holds it.

## Installing

    pip install .

To run the tests:

    pip install .[test]
    pytest

## Example

    from tmmux.rawstream import RawStream

    carousel = RawStream()
    carousel.add_sections_from_file("sections.bin")
    carousel.fill_buffer()
    chunk = carousel.get_buffer()
    carousel.dispose_buffer()

    from tmmux.playlist import Playlist

    playlist = Playlist()
    playlist.load("show.tmm")
    playlist.create_item()
    playlist.set_item_name("Evening news")
    playlist.save("show.tmm")

## What it does not do

The package does not multiplex, and it includes no command of its own:

- It has no transport stream packetiser, no PES handling and no encoding
  of PSI/SI tables.
- It has no scheduler that interleaves streams into an output, and no
  network output.
- It has no graphical editor.

`Transmission` only launches an external multiplexer program, which you
must provide. `Pipe` and `SharedMemory` only move bytes between processes.