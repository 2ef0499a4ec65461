"""
Comment-preserving document tree produced by the lossless parser.

Plain values are native Python objects: None, bool, float, str, list and
dict. AnnotatedValue wraps such a value together with the comments and
blank lines that surrounded it in the source, and keeps object keys in
source order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Optional


@dataclass
class Comment:
    """
    One comment line or blank line.

    Attributes:
        indent: Column of the '#' (or the width of a blank line's spaces).
        text: Everything after the '#', without the line break.
        blank: True for a line with no comment at all.
    """

    indent: int = 0
    text: str = ""
    blank: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ValueError("Comment indent must not be negative")
        if self.blank is None:
            self.blank = self.text == ""


class ObjectItem(NamedTuple):
    """One key/value entry of an object, in source order."""

    key: str
    node: "AnnotatedValue"


class NodeKind(Enum):
    SCALAR = "scalar"
    ARRAY = "array"
    OBJECT = "object"


class AnnotatedValue:
    """
    A value plus the comments attached to it.

    For arrays and objects, ``array_items`` / ``object_items`` are the only
    store: ``value`` is rebuilt from them on every access, so editing a child
    node is reflected in every ancestor's ``value``. Assigning a plain list
    or dict to ``value`` replaces the items with freshly wrapped children.

    ``closing_comments`` holds the comment lines between the last element of
    a multiline array and its closing bracket. ``absent`` marks an empty
    document, which still may carry comment lines; its value is None, like
    the value loads() returns for the same text.
    """

    def __init__(
        self,
        value: Any = None,
        leading_comments: Optional[list[Comment]] = None,
        inline_comment: Optional[str] = None,
        trailing_comments: Optional[list[Comment]] = None,
        closing_comments: Optional[list[Comment]] = None,
        absent: bool = False,
    ):
        self.kind = NodeKind.SCALAR
        self.array_items: list["AnnotatedValue"] = []
        self.object_items: list[ObjectItem] = []
        self._keys: set[str] = set()
        self._scalar: Any = None
        self.value = value
        self.leading_comments = leading_comments if leading_comments is not None else []
        self.inline_comment = inline_comment
        self.trailing_comments = trailing_comments if trailing_comments is not None else []
        self.closing_comments = closing_comments if closing_comments is not None else []
        self.absent = absent

    def __repr__(self) -> str:
        return (
            f"AnnotatedValue({self.value!r}, leading_comments={self.leading_comments!r}, "
            f"inline_comment={self.inline_comment!r})"
        )

    @property
    def value(self) -> Any:
        if self.kind is NodeKind.OBJECT:
            return {item.key: item.node.value for item in self.object_items}
        if self.kind is NodeKind.ARRAY:
            return [item.value for item in self.array_items]
        return self._scalar

    @value.setter
    def value(self, value: Any) -> None:
        self.array_items = []
        self.object_items = []
        self._keys = set()
        self._scalar = None
        if isinstance(value, dict):
            self.kind = NodeKind.OBJECT
            for key, child in value.items():
                self.set_item(key, AnnotatedValue(child))
        elif isinstance(value, (list, tuple)):
            self.kind = NodeKind.ARRAY
            for child in value:
                self.append(AnnotatedValue(child))
        else:
            self.kind = NodeKind.SCALAR
            self._scalar = value

    @property
    def is_null(self) -> bool:
        """True for a null value, including an absent (empty) document."""
        return self.kind is NodeKind.SCALAR and self._scalar is None

    @property
    def is_bool(self) -> bool:
        return self.kind is NodeKind.SCALAR and isinstance(self._scalar, bool)

    @property
    def is_number(self) -> bool:
        return (
            self.kind is NodeKind.SCALAR
            and isinstance(self._scalar, (int, float))
            and not isinstance(self._scalar, bool)
        )

    @property
    def is_string(self) -> bool:
        return self.kind is NodeKind.SCALAR and isinstance(self._scalar, str)

    @property
    def is_array(self) -> bool:
        return self.kind is NodeKind.ARRAY

    @property
    def is_object(self) -> bool:
        return self.kind is NodeKind.OBJECT

    @property
    def has_comments(self) -> bool:
        """True when the node itself carries comments (children not included)."""
        return bool(
            self.leading_comments
            or self.inline_comment is not None
            or self.trailing_comments
            or self.closing_comments
        )

    def get(self, key: str) -> Optional["AnnotatedValue"]:
        """Return the child node stored under key, or None."""
        if key not in self._keys:
            return None
        for item in self.object_items:
            if item.key == key:
                return item.node
        return None

    def set_item(self, key: str, node: "AnnotatedValue") -> None:
        """
        Store node under key; a later write wins over an earlier one.

        The overwritten entry is removed and the new one appended, so the
        surviving pair keeps the position it had in the source. Leading
        comments of the removed entry move to the entry that followed it.
        """
        if self.kind is not NodeKind.OBJECT:
            self.value = {}

        if key in self._keys:
            for index, item in enumerate(self.object_items):
                if item.key == key:
                    del self.object_items[index]
                    displaced = item.node.leading_comments
                    if displaced:
                        successor = (
                            self.object_items[index].node
                            if index < len(self.object_items)
                            else node
                        )
                        successor.leading_comments[:0] = displaced
                    break

        self.object_items.append(ObjectItem(key, node))
        self._keys.add(key)

    def append(self, node: "AnnotatedValue") -> None:
        """Append node as an array element."""
        if self.kind is not NodeKind.ARRAY:
            self.value = []
        self.array_items.append(node)

    def to_value(self) -> Any:
        """Rebuild the plain value from the annotated tree."""
        return self.value
