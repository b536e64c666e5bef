# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

"""Parsing of POM manifests and `maven-metadata.xml` documents.

Both are reduced here, once, to frozen dataclasses holding optional scalars and tuples, so that
resolution logic never touches DOM nodes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator
from xml.dom.minidom import Element, parseString

from pomwalk.base.exceptions import ManifestParseError


class _XmlError(Exception):
    pass


def _parse_document_element(content: bytes | str, expected_root: str) -> Element:
    try:
        document = parseString(content)
    # Minidom is a frontend for various parsers, only Exception covers ill-formed .xml for them all.
    except Exception as e:
        raise _XmlError(f"ill-formed xml: {e!r}")
    root = document.documentElement
    if _local_name(root) != expected_root:
        raise _XmlError(f"expected a <{expected_root}> root element, found <{root.tagName}>")
    return root


def _local_name(element: Element) -> str:
    return element.localName or element.tagName


def _children(element: Element | None, name: str) -> Iterator[Element]:
    if element is None:
        return
    for node in element.childNodes:
        if node.nodeType == node.ELEMENT_NODE and _local_name(node) == name:
            yield node


def _child(element: Element | None, name: str) -> Element | None:
    return next(_children(element, name), None)


def _text(element: Element | None, name: str) -> str | None:
    """The stripped text of the direct child `name` of `element`, or None if absent or empty."""
    child = _child(element, name)
    if child is None:
        return None
    text = "".join(
        node.data
        for node in child.childNodes
        if node.nodeType in (node.TEXT_NODE, node.CDATA_SECTION_NODE)
    ).strip()
    return text or None


@dataclass(frozen=True)
class ManifestDependency:
    """A `<parent>` or `<dependency>` node of a POM, with every field as found in the document.

    Defaults such as the `compile` scope are applied when a coordinate is built from the node, not
    here.
    """

    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    classifier: str | None = None
    scope: str | None = None
    optional: str | None = None

    @classmethod
    def from_element(cls, element: Element) -> ManifestDependency:
        return cls(
            group_id=_text(element, "groupId"),
            artifact_id=_text(element, "artifactId"),
            version=_text(element, "version"),
            classifier=_text(element, "classifier"),
            scope=_text(element, "scope"),
            optional=_text(element, "optional"),
        )


@dataclass(frozen=True)
class PomManifest:
    """The parts of a POM needed to discover further coordinates.

    `dependencies` and `dependency_management` are empty when the document has no such section.
    """

    packaging: str | None = None
    parent: ManifestDependency | None = None
    dependencies: tuple[ManifestDependency, ...] = ()
    dependency_management: tuple[ManifestDependency, ...] = ()

    @classmethod
    def parse(cls, content: bytes | str, *, source: str = "<pom>") -> PomManifest:
        """Parse POM xml.

        Only direct children are consulted at each level, so e.g. plugin dependencies under
        `<build>` are never mistaken for project dependencies.

        :raises ManifestParseError: if the content is not a well-formed `<project>` document.
        """
        try:
            project = _parse_document_element(content, "project")
        except _XmlError as e:
            raise ManifestParseError(f"Error parsing manifest at {source}: {e}")

        parent = _child(project, "parent")
        dependency_management = _child(_child(project, "dependencyManagement"), "dependencies")
        return cls(
            packaging=_text(project, "packaging"),
            parent=ManifestDependency.from_element(parent) if parent is not None else None,
            dependencies=tuple(
                ManifestDependency.from_element(e)
                for e in _children(_child(project, "dependencies"), "dependency")
            ),
            dependency_management=tuple(
                ManifestDependency.from_element(e)
                for e in _children(dependency_management, "dependency")
            ),
        )


@dataclass(frozen=True)
class MavenMetadata:
    """The `versioning/snapshot` section of a version-level `maven-metadata.xml`."""

    timestamp: str | None = None
    build_number: str | None = None

    class ParseError(Exception):
        """Raised when a metadata body is not a well-formed `<metadata>` document."""

    @classmethod
    def parse(cls, content: bytes | str) -> MavenMetadata:
        try:
            metadata = _parse_document_element(content, "metadata")
        except _XmlError as e:
            raise cls.ParseError(str(e))
        snapshot = _child(_child(metadata, "versioning"), "snapshot")
        return cls(
            timestamp=_text(snapshot, "timestamp"),
            build_number=_text(snapshot, "buildNumber"),
        )
