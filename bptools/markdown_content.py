"""Extraction of headings, paragraphs and lists from blueprint README files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from markdown_it import MarkdownIt
from markdown_it.rules_block import list_block
from markdown_it.tree import SyntaxTreeNode

_TIME_ESTIMATE_RE = re.compile(
    r"(Configuration|Deployment):[\t\n\f\r ]([0-9]+)[\t\n\f\r ]mins"
)
_MAX_INT64 = 2**63 - 1


class ContentNotFoundError(LookupError):
    """Raised when the requested markdown content is not present."""


@dataclass
class MdListItem:
    """One list entry: its text and, for a link, its destination."""

    text: str = ""
    url: str = ""


@dataclass
class MdContent:
    """Content found in a markdown document."""

    literal: str = ""
    url: str = ""
    list_items: list[MdListItem] = field(default_factory=list)


@dataclass
class TimeEstimate:
    """Configuration and deployment time estimates in seconds."""

    configuration_secs: int = 0
    deployment_secs: int = 0


@dataclass
class CostEstimate:
    """Cost description and the calculator link it points to."""

    description: str = ""
    url: str = ""


@dataclass
class Architecture:
    """Architecture description lines and the diagram URL."""

    description: list[str] = field(default_factory=list)
    diagram_url: str = ""


@dataclass(frozen=True)
class _Inline:
    kind: str
    literal: str = ""
    url: str = ""


def _new_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark").enable(["table", "strikethrough"])
    # a list needs a blank line before it: it never interrupts a paragraph
    md.block.ruler.at("list", list_block, {"alt": ["reference", "blockquote"]})
    # keep link destinations exactly as written
    md.normalizeLink = lambda url: url  # type: ignore[method-assign]
    return md


_MD = _new_parser()


def _parse(content: str | bytes) -> SyntaxTreeNode:
    if isinstance(content, (bytes, bytearray)):
        content = bytes(content).decode("utf-8", errors="replace")
    return SyntaxTreeNode(_MD.parse(content))


def _plain_text(node: SyntaxTreeNode) -> str:
    if node.type in ("text", "code_inline"):
        return node.content
    if node.type in ("softbreak", "hardbreak"):
        return "\n"
    return "".join(_plain_text(child) for child in node.children)


def _inlines(block: SyntaxTreeNode) -> list[_Inline]:
    """Return the inline parts of a block: text runs joined, other nodes separate.

    A block whose first inline is not text starts with an empty text part.
    """
    inline = next((child for child in block.children if child.type == "inline"), None)
    if inline is None:
        return []
    parts: list[_Inline] = []
    buffer: list[str] = []
    for child in inline.children:
        if child.type == "text":
            buffer.append(child.content)
            continue
        if child.type == "softbreak":
            buffer.append("\n")
            continue
        if buffer or not parts:
            parts.append(_Inline("text", "".join(buffer)))
            buffer = []
        if child.type == "link":
            parts.append(_Inline("link", _plain_text(child), str(child.attrs.get("href", ""))))
        elif child.type == "image":
            parts.append(_Inline("image", child.content, str(child.attrs.get("src", ""))))
        else:
            parts.append(_Inline("other", _plain_text(child)))
    if buffer:
        parts.append(_Inline("text", "".join(buffer)))
    return parts


def _list_item(item: SyntaxTreeNode) -> MdListItem:
    first = item.children[0] if item.children else None
    if first is None or first.type != "paragraph":
        return MdListItem()
    parts = _inlines(first)
    if len(parts) == 1:
        return MdListItem(text=parts[0].literal)
    if len(parts) > 1:
        second = parts[1]
        return MdListItem(text=second.literal, url=second.url if second.kind == "link" else "")
    return MdListItem()


def get_md_content(
    content: str | bytes,
    head_level: int,
    head_order: int,
    head_title: str,
    get_content: bool,
) -> MdContent:
    """Find a heading, or the paragraph or list right after it.

    The heading is matched by level and order, or by its title; -1 for level and
    order makes the title the only match. With get_content false the heading
    text is returned, otherwise the first paragraph or list following it.
    """
    order = 0
    found_head = False
    for section in _parse(content).children:
        if section.type == "heading":
            parts = _inlines(section)
            if not parts:
                continue
            literal = parts[0].literal
            found_head = head_title == literal
            if int(section.tag[1:]) == head_level:
                order += 1
            if not get_content and (head_order == order or found_head):
                return MdContent(literal=literal)
        elif section.type == "paragraph":
            parts = _inlines(section)
            if not parts:
                continue
            if get_content and (head_order == order or found_head):
                last = parts[-1]
                if last.kind == "link":
                    return MdContent(literal=last.literal, url=last.url)
                return MdContent(literal=parts[0].literal)
        elif section.type in ("bullet_list", "ordered_list"):
            if get_content and (head_order == order or found_head):
                return MdContent(list_items=[_list_item(item) for item in section.children])
    raise ContentNotFoundError("unable to find md content")


def get_deployment_duration(content: str | bytes, head_title: str) -> TimeEstimate:
    """Read configuration and deployment minutes from the section under head_title."""
    details = get_md_content(content, -1, -1, head_title, True)
    matches = _TIME_ESTIMATE_RE.findall(details.literal)
    if not matches:
        raise ContentNotFoundError("unable to find deployment duration")
    estimate = TimeEstimate()
    for kind, minutes in matches:
        value = int(minutes)
        if value > _MAX_INT64:
            continue
        if kind == "Configuration":
            estimate.configuration_secs = value * 60
        else:
            estimate.deployment_secs = value * 60
    return estimate


def get_cost_estimate(content: str | bytes, head_title: str) -> CostEstimate:
    """Read the cost description and calculator link under head_title."""
    details = get_md_content(content, -1, -1, head_title, True)
    return CostEstimate(description=details.literal, url=details.url)


def get_architecture_info(content: str | bytes, head_title: str) -> Architecture:
    """Read the diagram and description lines from the paragraph after head_title."""
    nodes = _parse(content).children
    for index, node in enumerate(nodes):
        if node.type != "heading":
            continue
        heading = _inlines(node)
        if not heading or heading[0].literal != head_title:
            continue
        if index + 1 >= len(nodes) or nodes[index + 1].type != "paragraph":
            continue
        parts = _inlines(nodes[index + 1])
        if len(parts) < 2 or parts[-1].kind != "text":
            continue
        description = parts[-1].literal.lstrip("\n").split("\n")
        previous = parts[-2]
        if previous.kind in ("image", "link"):
            return Architecture(description=description, diagram_url=previous.url)
    raise ContentNotFoundError("unable to find architecture content")