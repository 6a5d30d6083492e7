"""Minimal xcsg XML document builder on top of ElementTree."""

from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from pathlib import Path

import numpy as np

from csgxml.errors import ExportError

XCSG_VERSION = "1.0"


def format_property(value: object) -> str:
    """Render an attribute value the way xcsg expects it."""
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)):
        return repr(float(value))
    return str(value)


class XmlNode:
    """Handle on one element; children and attributes are append-only."""

    __slots__ = ("element",)

    def __init__(self, element: ET.Element) -> None:
        self.element = element

    @property
    def tag(self) -> str:
        return self.element.tag

    def add_child(self, tag: str) -> XmlNode:
        return XmlNode(ET.SubElement(self.element, tag))

    def add_property(self, name: str, value: object) -> None:
        self.element.set(name, format_property(value))

    @property
    def children(self) -> list[XmlNode]:
        return [XmlNode(child) for child in self.element]

    @property
    def properties(self) -> dict[str, str]:
        return dict(self.element.attrib)


class XcsgDocument:
    """An ``<xcsg version="1.0">`` document."""

    def __init__(self) -> None:
        self.root = XmlNode(ET.Element("xcsg", version=XCSG_VERSION))

    @property
    def model(self) -> XmlNode:
        """The single top-level solid (always a union)."""
        children = self.root.children
        if len(children) != 1:
            raise ExportError(f"xcsg document must hold exactly one model, found {len(children)}")
        return children[0]

    def to_string(self) -> str:
        element = copy.deepcopy(self.root.element)
        ET.indent(element, space="   ")
        body = ET.tostring(element, encoding="unicode")
        return f'<?xml version="1.0" encoding="utf-8"?>\n{body}\n'

    def write(self, path: Path) -> None:
        try:
            path.write_text(self.to_string(), encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Cannot write xcsg file {path}: {e}") from e
