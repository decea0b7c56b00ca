"""Input tree node describing a repository file/folder hierarchy."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Self

from pycity.errors import ValidationError


class NodeType(Enum):
    """Type of tree node."""

    FILE = "file"
    FOLDER = "folder"

    @classmethod
    def coerce(cls, value: object) -> "NodeType":
        """Convert a raw value to a NodeType.

        Args:
            value: A NodeType or its string value

        Returns:
            The matching NodeType

        Raises:
            ValidationError: If the value names no known type
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("type", value, "'file' or 'folder'") from None


@dataclass
class TreeNode:
    """A file or folder in the hierarchy handed to the layout engine.

    The engine never mutates a TreeNode; it only reads it while flattening.

    Attributes:
        name: Base name of the file/folder
        type: NodeType of this node
        children: Ordered child nodes (folders only)
        loc: Lines of code, used as the height hint for files
        content: Opaque payload passed through to the output (code snippet)
        url: Opaque reference passed through to the output (e.g. blob URL)
    """

    name: str
    type: NodeType
    children: list[Self] = field(default_factory=list)
    loc: int | None = None
    content: str | None = None
    url: str | None = None

    def __post_init__(self) -> None:
        self.type = NodeType.coerce(self.type)
        if not isinstance(self.name, str) or not self.name:
            raise ValidationError("name", self.name, "non-empty string")
        if self.type == NodeType.FILE and self.children:
            raise ValidationError(f"{self.name}.children", len(self.children), "no children on a file")
        if self.loc is not None and (isinstance(self.loc, bool) or not isinstance(self.loc, int)):
            raise ValidationError(f"{self.name}.loc", self.loc, "integer or None")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build a tree from its dict (JSON) form.

        Args:
            data: Mapping with ``name``, ``type`` and optionally ``children``,
                ``loc``, ``content`` and ``url``

        Returns:
            Root TreeNode of the converted tree

        Raises:
            ValidationError: If a node is malformed
        """
        root = cls._from_fields(data)
        stack = [(data, root)]

        # Iterative so arbitrarily deep trees convert without recursion
        while stack:
            item, node = stack.pop()
            children = item.get("children") or []
            if not isinstance(children, list):
                raise ValidationError(f"{node.name}.children", children, "list")
            if children and node.is_file:
                raise ValidationError(f"{node.name}.children", len(children), "no children on a file")

            for child_data in children:
                child = cls._from_fields(child_data)
                node.children.append(child)
                stack.append((child_data, child))

        return root

    @classmethod
    def _from_fields(cls, data: Mapping[str, Any]) -> Self:
        """Build a single node, without children, from its dict form."""
        if not isinstance(data, Mapping):
            raise ValidationError("node", data, "mapping")
        if "type" not in data:
            raise ValidationError(f"{data.get('name', '?')}.type", None, "'file' or 'folder'")

        return cls(
            name=data.get("name"),
            type=NodeType.coerce(data["type"]),
            loc=data.get("loc"),
            content=data.get("content"),
            url=data.get("url"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert this tree back to its dict (JSON) form."""
        root = self._fields_dict()
        stack = [(self, root)]
        while stack:
            node, result = stack.pop()
            if node.is_folder:
                result["children"] = []
                for child in node.children:
                    child_result = child._fields_dict()
                    result["children"].append(child_result)
                    stack.append((child, child_result))
        return root

    def _fields_dict(self) -> dict[str, Any]:
        """Convert this node, without children, to its dict form."""
        result: dict[str, Any] = {"name": self.name, "type": self.type.value}
        if self.loc is not None:
            result["loc"] = self.loc
        if self.content is not None:
            result["content"] = self.content
        if self.url is not None:
            result["url"] = self.url
        return result

    @property
    def is_file(self) -> bool:
        """Check if this node is a file."""
        return self.type == NodeType.FILE

    @property
    def is_folder(self) -> bool:
        """Check if this node is a folder."""
        return self.type == NodeType.FOLDER

    def walk(self) -> Iterator[Self]:
        """Yield this node and all descendants in depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def node_count(self) -> int:
        """Get total number of nodes in this subtree, including self."""
        return sum(1 for _ in self.walk())

    @property
    def file_count(self) -> int:
        """Get total number of files in this subtree."""
        return sum(1 for node in self.walk() if node.is_file)

    @property
    def folder_count(self) -> int:
        """Get total number of folders in this subtree."""
        return sum(1 for node in self.walk() if node.is_folder)

    def __repr__(self) -> str:
        """String representation of the node."""
        return f"TreeNode({self.type.value}, {self.name}, children={len(self.children)})"
