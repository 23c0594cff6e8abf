"""An editable tree of rows and columns, built from indented tab-separated text."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any


class ItemFlag(enum.Flag):
    """What a view may do with an item."""

    NONE = 0
    SELECTABLE = enum.auto()
    EDITABLE = enum.auto()
    ENABLED = enum.auto()


class TreeItem:
    """A node holding one value per column and an ordered list of children."""

    def __init__(self, data: Iterable[Any] = (), parent: TreeItem | None = None) -> None:
        self.item_data: list[Any] = list(data)
        self.parent = parent
        self.children: list[TreeItem] = []

    def child(self, number: int) -> TreeItem | None:
        """Return the child at ``number``, or None when there is none."""
        if 0 <= number < len(self.children):
            return self.children[number]
        return None

    def child_count(self) -> int:
        return len(self.children)

    def child_number(self) -> int:
        """Return this item's row within its parent; 0 for a root item."""
        if self.parent is None:
            return 0
        return self.parent.children.index(self)

    def column_count(self) -> int:
        return len(self.item_data)

    def data(self, column: int) -> Any:
        """Return the value in ``column``, or None when the column does not exist."""
        if 0 <= column < len(self.item_data):
            return self.item_data[column]
        return None

    def insert_children(self, position: int, count: int, columns: int) -> None:
        """Insert ``count`` empty children with ``columns`` columns at ``position``."""
        if not 0 <= position <= len(self.children):
            raise IndexError(f"child position {position} out of range")
        for _ in range(count):
            self.children.insert(position, TreeItem([None] * columns, self))

    def insert_columns(self, position: int, columns: int) -> None:
        """Insert empty columns here and in every descendant."""
        if not 0 <= position <= len(self.item_data):
            raise IndexError(f"column position {position} out of range")
        for _ in range(columns):
            self.item_data.insert(position, None)
        for child in self.children:
            child.insert_columns(position, columns)

    def remove_children(self, position: int, count: int) -> None:
        if position < 0 or position + count > len(self.children):
            raise IndexError(f"cannot remove {count} children at {position}")
        del self.children[position:position + count]

    def remove_columns(self, position: int, columns: int) -> None:
        """Remove columns here and in every descendant."""
        if position < 0 or position + columns > len(self.item_data):
            raise IndexError(f"cannot remove {columns} columns at {position}")
        del self.item_data[position:position + columns]
        for child in self.children:
            child.remove_columns(position, columns)

    def set_data(self, column: int, value: Any) -> None:
        if not 0 <= column < len(self.item_data):
            raise IndexError(f"column {column} out of range")
        self.item_data[column] = value


@dataclass(frozen=True)
class ModelIndex:
    """A position in a TreeModel; the default instance is the invalid index."""

    row: int = -1
    column: int = -1
    item: TreeItem | None = None

    @property
    def is_valid(self) -> bool:
        return self.row >= 0 and self.column >= 0 and self.item is not None


_INVALID = ModelIndex()


class TreeModel:
    """A tree of items whose columns are named by a header row."""

    def __init__(self, headers: Iterable[str], data: str = "") -> None:
        self.root = TreeItem(headers)
        self.data_changed: list[Callable[[ModelIndex, ModelIndex], None]] = []
        self.header_data_changed: list[Callable[[int, int], None]] = []
        self._setup_model_data(data.split("\n"), self.root)

    def _setup_model_data(self, lines: list[str], parent: TreeItem) -> None:
        parents = [parent]
        indentations = [0]
        columns = self.root.column_count()
        for line in lines:
            position = len(line) - len(line.lstrip(" "))
            line_data = line[position:].strip()
            if not line_data:
                continue
            column_strings = [part for part in line_data.split("\t") if part]

            if position > indentations[-1]:
                # The last child of the current parent becomes the new parent,
                # unless the current parent has no children yet.
                current = parents[-1]
                if current.child_count() > 0:
                    parents.append(current.children[-1])
                    indentations.append(position)
            else:
                while position < indentations[-1] and len(parents) > 1:
                    parents.pop()
                    indentations.pop()

            current = parents[-1]
            current.insert_children(current.child_count(), 1, columns)
            item = current.children[-1]
            for column, value in enumerate(column_strings[:columns]):
                item.set_data(column, value)

    def _get_item(self, index: ModelIndex | None) -> TreeItem:
        if index is not None and index.is_valid:
            return index.item
        return self.root

    def index(self, row: int, column: int, parent: ModelIndex | None = None) -> ModelIndex:
        """Return the index of a child of ``parent``, or the invalid index."""
        if parent is not None and parent.is_valid and parent.column != 0:
            return _INVALID
        child = self._get_item(parent).child(row)
        if child is None:
            return _INVALID
        return ModelIndex(row, column, child)

    def parent(self, index: ModelIndex) -> ModelIndex:
        """Return the index of the item's parent; top-level items have none."""
        if not index.is_valid:
            return _INVALID
        parent_item = self._get_item(index).parent
        if parent_item is None or parent_item is self.root:
            return _INVALID
        return ModelIndex(parent_item.child_number(), 0, parent_item)

    def row_count(self, parent: ModelIndex | None = None) -> int:
        return self._get_item(parent).child_count()

    def column_count(self, parent: ModelIndex | None = None) -> int:
        return self.root.column_count()

    def data(self, index: ModelIndex) -> Any:
        if not index.is_valid:
            return None
        return self._get_item(index).data(index.column)

    def header_data(self, section: int) -> Any:
        return self.root.data(section)

    def flags(self, index: ModelIndex) -> ItemFlag:
        if not index.is_valid:
            return ItemFlag.NONE
        return ItemFlag.EDITABLE | ItemFlag.ENABLED | ItemFlag.SELECTABLE

    def set_data(self, index: ModelIndex, value: Any) -> None:
        """Change one cell and notify the ``data_changed`` listeners."""
        self._get_item(index).set_data(index.column, value)
        for listener in self.data_changed:
            listener(index, index)

    def set_header_data(self, section: int, value: Any) -> None:
        """Rename a column and notify the ``header_data_changed`` listeners."""
        self.root.set_data(section, value)
        for listener in self.header_data_changed:
            listener(section, section)

    def insert_rows(self, position: int, rows: int, parent: ModelIndex | None = None) -> None:
        self._get_item(parent).insert_children(position, rows, self.root.column_count())

    def remove_rows(self, position: int, rows: int, parent: ModelIndex | None = None) -> None:
        self._get_item(parent).remove_children(position, rows)

    def insert_columns(self, position: int, columns: int) -> None:
        self.root.insert_columns(position, columns)

    def remove_columns(self, position: int, columns: int) -> None:
        """Remove columns; removing the last one also removes every row."""
        self.root.remove_columns(position, columns)
        if self.root.column_count() == 0:
            self.remove_rows(0, self.row_count())