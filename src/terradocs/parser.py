"""Parser for provider documentation pages.

Turns a raw ``*.html.markdown`` page into a DocumentRecord. The markdown pass
is a single scan that tracks fenced code blocks (``` or ~~~, closed only by
the same marker) so headings and list items inside examples are never
mistaken for document structure. HTML pages are first normalised with
BeautifulSoup into the same markdown shape.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
import yaml
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.models.docs import (
    ArgumentDefinition,
    AttributeDefinition,
    DocumentRecord,
    ExampleBlock,
)

if TYPE_CHECKING:
    from terradocs.models.docs import ResourceIdentifier

log = structlog.get_logger()

EXAMPLE_LANGUAGES = frozenset({"terraform", "hcl", "tf"})

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_ITEM_RE = re.compile(r"^\s*[*-]\s+`([^`]+)`\s*(?:[-–:]\s*)?(.*)$")
_QUALIFIER_RE = re.compile(r"\(\s*((?:Required|Optional)[^)]*)\)")
_DEFAULT_RES = (
    re.compile(r"(?:Defaults to|Default:|default is)\s*`([^`]+)`[.,]?\s*", re.IGNORECASE),
    re.compile(r"(?:Defaults to|Default:|default is)\s*([^.`]+)\.\s*", re.IGNORECASE),
)
_FORCES_NEW_RE = re.compile(r"forces\s+(?:a\s+)?new\s+resource", re.IGNORECASE)
_ARGUMENT_HEADING_RE = re.compile(r"^arguments?\b", re.IGNORECASE)
_ATTRIBUTE_HEADING_RE = re.compile(r"^attributes?\b", re.IGNORECASE)

_PLACEHOLDER_RE = re.compile(
    r"javascript\s+(?:is\s+)?required|enable\s+javascript|requires\s+javascript",
    re.IGNORECASE,
)
_DOC_MARKER_RE = re.compile(
    r"^#{1,6}\s+(?:resource|data\s+source|arguments?|attributes?)\b"
    r"|^\s*(?:```|~~~)"
    r"|<h[1-6][^>]*>\s*(?:resource|data\s+source|arguments?|attributes?)"
    r"|<pre[\s>]",
    re.IGNORECASE | re.MULTILINE,
)

_TYPE_WORDS = {
    "string": "String",
    "number": "Number",
    "int": "Number",
    "integer": "Number",
    "bool": "Bool",
    "boolean": "Bool",
    "list": "List",
    "set": "Set",
    "map": "Map",
    "block": "Block",
}


@dataclass
class _Heading:
    level: int
    text: str


@dataclass
class _Section:
    heading: _Heading | None
    lines: list[str] = field(default_factory=list)


@dataclass
class _FencedBlock:
    language: str
    title: str | None
    lines: list[str] = field(default_factory=list)


@dataclass
class _Outline:
    sections: list[_Section]
    blocks: list[_FencedBlock]

    @property
    def title(self) -> str | None:
        for section in self.sections:
            if section.heading is not None and section.heading.level == 1:
                return section.heading.text
        return None

    def has_heading(self, pattern: re.Pattern[str]) -> bool:
        return any(
            s.heading is not None and pattern.match(s.heading.text) for s in self.sections
        )


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------


def is_placeholder(content: str) -> bool:
    """True for JavaScript-required shells that carry no documentation."""
    if _DOC_MARKER_RE.search(content):
        return False
    return bool(_PLACEHOLDER_RE.search(content)) or "<noscript" in content.lower()


def is_html(content: str) -> bool:
    head = content.lstrip()[:32].lower()
    return head.startswith(("<!doctype", "<html"))


def parse_document(
    content: str,
    identifier: ResourceIdentifier,
    *,
    version: str,
    source_url: str,
) -> DocumentRecord:
    """Parse a documentation page into a DocumentRecord.

    Raises TerraDocsError with UNSUPPORTED_CONTENT for JavaScript placeholder
    pages and PARSE_FAILED for empty or unstructured content. Missing optional
    sections produce empty sequences.
    """
    if not content.strip():
        raise _parse_failed(f"Empty documentation page for {identifier}", source_url)

    if is_placeholder(content):
        raise TerraDocsError(
            code=ErrorCode.UNSUPPORTED_CONTENT,
            message=f"Documentation for {identifier} is a JavaScript-rendered placeholder",
            suggestion="This page needs a browser to render. Try the raw markdown source instead.",
            recoverable=False,
            url=source_url,
        )

    if is_html(content):
        content = html_to_markdown(content)

    front_matter, body = split_front_matter(content)
    outline = _build_outline(body)

    if not (
        outline.title
        or outline.has_heading(_ARGUMENT_HEADING_RE)
        or outline.has_heading(_ATTRIBUTE_HEADING_RE)
        or outline.blocks
    ):
        raise _parse_failed(f"No documentation structure found for {identifier}", source_url)

    record = DocumentRecord(
        identifier=identifier,
        title=outline.title or _str_or_none(front_matter.get("page_title")) or identifier.name,
        subcategory=_str_or_none(front_matter.get("subcategory")),
        description=_str_or_none(front_matter.get("description")) or _first_paragraph(outline),
        arguments=tuple(
            _argument(name, text)
            for name, text in _list_items(_section_lines(outline, _ARGUMENT_HEADING_RE))
        ),
        attributes=tuple(
            AttributeDefinition(name=name, description=text)
            for name, text in _list_items(_section_lines(outline, _ATTRIBUTE_HEADING_RE))
        ),
        examples=tuple(
            ExampleBlock(language=block.language, source="\n".join(block.lines), title=block.title)
            for block in outline.blocks
            if block.language in EXAMPLE_LANGUAGES
        ),
        fetched_at=datetime.now(UTC),
        source_version=version,
        source_url=source_url,
    )
    log.debug(
        "document_parsed",
        identifier=identifier.key,
        arguments=len(record.arguments),
        attributes=len(record.attributes),
        examples=len(record.examples),
    )
    return record


def split_front_matter(content: str) -> tuple[dict[str, Any], str]:
    """Split a leading ``---`` YAML block from the markdown body.

    Malformed front matter is dropped and the body is still returned.
    """
    lines = content.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, content
    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            break
    else:
        return {}, content

    body = "\n".join(lines[end + 1 :])
    try:
        data = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError:
        log.debug("front_matter_invalid", exc_info=True)
        return {}, body
    return (data if isinstance(data, dict) else {}), body


def html_to_markdown(content: str) -> str:
    """Flatten an HTML documentation page into headings, list items and fences."""
    soup = BeautifulSoup(content, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    lines: list[str] = []
    for el in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "pre"]):
        if el.find_parent("pre") is not None:
            continue
        if el.name == "pre":
            code = el.find("code") or el
            classes = code.get("class") or []
            language = next(
                (c.removeprefix("language-") for c in classes if c.startswith("language-")), ""
            )
            lines.extend([f"```{language}", code.get_text().strip("\n"), "```", ""])
        elif el.name == "p":
            if el.find_parent("li") is None:
                lines.extend([_inline_text(el), ""])
        elif el.name == "li":
            lines.append(f"* {_inline_text(el)}")
        else:
            lines.extend([f"{'#' * int(el.name[1])} {_inline_text(el)}", ""])
    return "\n".join(lines)


# ----------------------------------------------------------------------
# Outline
# ----------------------------------------------------------------------


def _build_outline(body: str) -> _Outline:
    sections = [_Section(heading=None)]
    blocks: list[_FencedBlock] = []
    fence: str | None = None
    current: _FencedBlock | None = None
    subheading: str | None = None

    for line in body.splitlines():
        stripped = line.strip()

        if current is not None:
            if fence and stripped.startswith(fence) and not stripped.strip(fence[0]):
                blocks.append(current)
                current = None
                fence = None
            else:
                current.lines.append(line)
            continue

        if stripped.startswith(("```", "~~~")):
            fence = stripped[:3]
            info = stripped.lstrip(fence[0]).strip()
            language = info.split()[0].lower() if info else ""
            current = _FencedBlock(language=language, title=subheading)
            sections[-1].lines.append("")
            continue

        match = _HEADING_RE.match(line)
        if match:
            level = len(match.group(1))
            text = match.group(2).strip().rstrip("#").strip()
            sections.append(_Section(heading=_Heading(level=level, text=text)))
            subheading = text if level >= 3 else None
            continue

        sections[-1].lines.append(line)

    if current is not None:
        log.debug("unterminated_fence", language=current.language)
        blocks.append(current)

    return _Outline(sections=sections, blocks=blocks)


def _section_lines(outline: _Outline, pattern: re.Pattern[str]) -> list[str]:
    """Prose lines of every matching section, including its sub-sections."""
    lines: list[str] = []
    depth: int | None = None
    for section in outline.sections:
        heading = section.heading
        if depth is not None:
            if heading is None or heading.level > depth:
                lines.append("")
                lines.extend(section.lines)
                continue
            depth = None
        if heading is not None and pattern.match(heading.text):
            depth = heading.level
            lines.append("")
            lines.extend(section.lines)
    return lines


def _first_paragraph(outline: _Outline) -> str:
    started = False
    for section in outline.sections:
        if not started:
            started = section.heading is not None and section.heading.level == 1
            if not started:
                continue
        paragraph: list[str] = []
        for line in section.lines:
            stripped = line.strip()
            if stripped:
                paragraph.append(stripped)
            elif paragraph:
                break
        return " ".join(paragraph)
    return ""


# ----------------------------------------------------------------------
# List items
# ----------------------------------------------------------------------


def _list_items(lines: list[str]) -> list[tuple[str, str]]:
    items: list[tuple[str, list[str]]] = []
    current: list[str] | None = None
    for line in lines:
        match = _ITEM_RE.match(line)
        if match:
            current = [match.group(2).strip()]
            items.append((match.group(1).strip(), current))
        elif not line.strip():
            current = None
        elif current is not None:
            current.append(line.strip())  # continuation line
    return [(name, " ".join(p for p in parts if p)) for name, parts in items]


def _argument(name: str, text: str) -> ArgumentDefinition:
    required = False
    type_: str | None = None
    qualifier = _QUALIFIER_RE.search(text)
    if qualifier:
        parts = [p.strip() for p in qualifier.group(1).split(",")]
        required = parts[0].startswith("Required")
        for part in parts[1:]:
            word = _TYPE_WORDS.get(part.lower())
            if word:
                type_ = word
    if type_ is None and "configuration block" in text.lower():
        type_ = "Block"

    default: str | None = None
    for pattern in _DEFAULT_RES:
        match = pattern.search(text)
        if match:
            default = match.group(1).strip()
            break

    cleaned = _QUALIFIER_RE.sub("", text)
    for pattern in _DEFAULT_RES:
        cleaned = pattern.sub("", cleaned)

    return ArgumentDefinition(
        name=name,
        type=type_,
        required=required,
        description=" ".join(cleaned.split()),
        default=default,
        forces_new=bool(_FORCES_NEW_RE.search(text)),
    )


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _inline_text(el: Tag) -> str:
    parts: list[str] = []
    for child in el.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag):
            if child.name == "code":
                parts.append(f"`{child.get_text()}`")
            elif child.name not in ("ul", "ol", "pre"):
                parts.append(_inline_text(child))
    return " ".join("".join(parts).split())


def _str_or_none(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return " ".join(value.split())
    return None


def _parse_failed(message: str, url: str) -> TerraDocsError:
    return TerraDocsError(
        code=ErrorCode.PARSE_FAILED,
        message=message,
        suggestion="The documentation page has an unexpected format.",
        recoverable=False,
        url=url,
    )
