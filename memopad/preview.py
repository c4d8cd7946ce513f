"""Markdown preview: document tree, HTML and plain-text views.

Parsing is delegated to markdown-it-py. This module maps its syntax tree
onto a small document tree with the presentation the memo preview needs:
headings folded to three levels, and unordered lists whose bullet glyph
cycles with the list's nesting depth.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

BULLET_MARKERS = ("•", "○", "▪", "▫", "▹")
MAX_HEADING_LEVEL = 3


def create_parser() -> MarkdownIt:
    """Create configured markdown-it parser (raw HTML is kept as text)."""
    md = MarkdownIt("commonmark", {"html": False})
    md.enable("table")
    md.enable("strikethrough")
    return md


_parser: MarkdownIt | None = None


def get_parser() -> MarkdownIt:
    global _parser
    if _parser is None:
        _parser = create_parser()
    return _parser


def bullet_marker(depth: int) -> str:
    return BULLET_MARKERS[depth % len(BULLET_MARKERS)]


# ---------------------------------------------------------------------------
# Document tree
# ---------------------------------------------------------------------------


@dataclass
class Text:
    text: str


@dataclass
class LineBreak:
    hard: bool = False


@dataclass
class InlineCode:
    code: str


@dataclass
class Strong:
    children: list = field(default_factory=list)


@dataclass
class Emphasis:
    children: list = field(default_factory=list)


@dataclass
class Strikethrough:
    children: list = field(default_factory=list)


@dataclass
class Link:
    href: str
    children: list = field(default_factory=list)
    title: str | None = None


@dataclass
class Image:
    src: str
    alt: str = ""


@dataclass
class Heading:
    level: int
    children: list = field(default_factory=list)


@dataclass
class Paragraph:
    children: list = field(default_factory=list)


@dataclass
class ListItem:
    marker: str
    children: list = field(default_factory=list)


@dataclass
class BulletList:
    depth: int
    marker: str
    items: list[ListItem] = field(default_factory=list)
    tight: bool = True


@dataclass
class OrderedList:
    depth: int
    start: int = 1
    items: list[ListItem] = field(default_factory=list)
    tight: bool = True


@dataclass
class CodeBlock:
    code: str
    info: str = ""


@dataclass
class Blockquote:
    children: list = field(default_factory=list)


@dataclass
class ThematicBreak:
    pass


@dataclass
class TableCell:
    children: list = field(default_factory=list)
    header: bool = False
    align: str | None = None


@dataclass
class Table:
    rows: list[list[TableCell]] = field(default_factory=list)


@dataclass
class Document:
    children: list = field(default_factory=list)


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


def build_document(source: str) -> Document:
    """Parse ``source`` and map it onto a fresh document tree."""
    root = SyntaxTreeNode(get_parser().parse(source))
    return Document(children=_blocks(root.children, depth=0))


def _blocks(nodes, depth: int) -> list:
    """Map block nodes; ``depth`` is the depth any list found here gets."""
    out: list = []
    for node in nodes:
        block = _block(node, depth)
        if block is not None:
            out.append(block)
    return out


def _block(node: SyntaxTreeNode, depth: int):
    kind = node.type
    if kind == "heading":
        level = int(node.tag[1:])
        return Heading(level=min(level, MAX_HEADING_LEVEL), children=_inline_of(node))
    if kind == "paragraph":
        return Paragraph(children=_inline_of(node))
    if kind == "bullet_list":
        marker = bullet_marker(depth)
        items = [ListItem(marker, _blocks(item.children, depth + 1)) for item in node.children]
        return BulletList(depth=depth, marker=marker, items=items, tight=_is_tight(node))
    if kind == "ordered_list":
        start = int(node.attrs.get("start", 1))
        items = [
            ListItem(f"{start + i}.", _blocks(item.children, depth + 1))
            for i, item in enumerate(node.children)
        ]
        return OrderedList(depth=depth, start=start, items=items, tight=_is_tight(node))
    if kind in ("fence", "code_block"):
        return CodeBlock(code=node.content, info=(node.info or "").strip())
    if kind == "blockquote":
        return Blockquote(children=_blocks(node.children, depth))
    if kind == "hr":
        return ThematicBreak()
    if kind == "table":
        return _table(node)
    if kind == "html_block":
        return Paragraph(children=[Text(node.content.strip())])
    return None


def _is_tight(node: SyntaxTreeNode) -> bool:
    # markdown-it hides the paragraphs of tight list items
    return all(
        child.hidden
        for item in node.children
        for child in item.children
        if child.type == "paragraph"
    )


def _inline_of(node: SyntaxTreeNode) -> list:
    out: list = []
    for child in node.children:
        if child.type == "inline":
            out.extend(_inlines(child.children))
    return out


def _inlines(nodes) -> list:
    out: list = []
    for node in nodes:
        kind = node.type
        if kind in ("text", "html_inline"):
            # markdown-it leaves empty text tokens around emphasis delimiters
            if not node.content:
                continue
            if out and isinstance(out[-1], Text):
                out[-1] = Text(out[-1].text + node.content)
            else:
                out.append(Text(node.content))
        elif kind == "softbreak":
            out.append(LineBreak())
        elif kind == "hardbreak":
            out.append(LineBreak(hard=True))
        elif kind == "code_inline":
            out.append(InlineCode(node.content))
        elif kind == "strong":
            out.append(Strong(_inlines(node.children)))
        elif kind == "em":
            out.append(Emphasis(_inlines(node.children)))
        elif kind == "s":
            out.append(Strikethrough(_inlines(node.children)))
        elif kind == "link":
            title = node.attrs.get("title")
            out.append(Link(str(node.attrs.get("href", "")), _inlines(node.children), title))
        elif kind == "image":
            alt = "".join(_plain_inline(_inlines(node.children)))
            out.append(Image(str(node.attrs.get("src", "")), alt))
    return out


def _table(node: SyntaxTreeNode) -> Table:
    table = Table()
    for section in node.children:
        for row in section.children:
            cells = []
            for cell in row.children:
                style = str(cell.attrs.get("style", ""))
                align = style.removeprefix("text-align:") or None
                cells.append(TableCell(_inline_of(cell), header=cell.type == "th", align=align))
            table.rows.append(cells)
    return table


# ---------------------------------------------------------------------------
# HTML view
# ---------------------------------------------------------------------------


def render_markdown(source: str) -> str:
    return render_html(build_document(source))


def render_html(document: Document) -> str:
    return "\n".join(_html_block(block) for block in document.children)


def _html_blocks(blocks: list) -> str:
    return "".join(_html_block(block) for block in blocks)


def _html_block(block) -> str:
    if isinstance(block, Heading):
        return f"<h{block.level}>{_html_inline(block.children)}</h{block.level}>"
    if isinstance(block, Paragraph):
        return f"<p>{_html_inline(block.children)}</p>"
    if isinstance(block, BulletList):
        items = "".join(
            f'<li><span class="marker" aria-hidden="true">{html.escape(item.marker)}</span>'
            f"{_html_item(item, block.tight)}</li>"
            for item in block.items
        )
        return f'<ul class="bullets depth-{block.depth}">{items}</ul>'
    if isinstance(block, OrderedList):
        start = f' start="{block.start}"' if block.start != 1 else ""
        items = "".join(f"<li>{_html_item(item, block.tight)}</li>" for item in block.items)
        return f'<ol class="numbers depth-{block.depth}"{start}>{items}</ol>'
    if isinstance(block, CodeBlock):
        lang = f' data-lang="{html.escape(block.info)}"' if block.info else ""
        return f"<pre{lang}><code>{html.escape(block.code)}</code></pre>"
    if isinstance(block, Blockquote):
        return f"<blockquote>{_html_blocks(block.children)}</blockquote>"
    if isinstance(block, ThematicBreak):
        return "<hr>"
    if isinstance(block, Table):
        return _html_table(block)
    return ""


def _html_item(item: ListItem, tight: bool) -> str:
    if not tight:
        return _html_blocks(item.children)
    # Paragraphs of tight items render without <p>
    return "".join(
        _html_inline(child.children) if isinstance(child, Paragraph) else _html_block(child)
        for child in item.children
    )


def _html_table(table: Table) -> str:
    rows = []
    for row in table.rows:
        cells = []
        for cell in row:
            tag = "th" if cell.header else "td"
            align = f' style="text-align:{html.escape(cell.align)}"' if cell.align else ""
            cells.append(f"<{tag}{align}>{_html_inline(cell.children)}</{tag}>")
        rows.append(f"<tr>{''.join(cells)}</tr>")
    return f"<table>{''.join(rows)}</table>"


def _html_inline(nodes: list) -> str:
    parts = []
    for node in nodes:
        if isinstance(node, Text):
            parts.append(html.escape(node.text))
        elif isinstance(node, LineBreak):
            parts.append("<br>" if node.hard else "\n")
        elif isinstance(node, InlineCode):
            parts.append(f'<code class="inline">{html.escape(node.code)}</code>')
        elif isinstance(node, Strong):
            parts.append(f"<strong>{_html_inline(node.children)}</strong>")
        elif isinstance(node, Emphasis):
            parts.append(f"<em>{_html_inline(node.children)}</em>")
        elif isinstance(node, Strikethrough):
            parts.append(f"<del>{_html_inline(node.children)}</del>")
        elif isinstance(node, Link):
            title = f' title="{html.escape(node.title)}"' if node.title else ""
            parts.append(
                f'<a href="{html.escape(node.href)}"{title}>{_html_inline(node.children)}</a>'
            )
        elif isinstance(node, Image):
            parts.append(f'<img src="{html.escape(node.src)}" alt="{html.escape(node.alt)}">')
    return "".join(parts)


# ---------------------------------------------------------------------------
# Plain-text view
# ---------------------------------------------------------------------------


def plain_text(document: Document) -> str:
    """Strip all markup, keeping text content and block boundaries."""
    return "\n\n".join(_plain_block(block) for block in document.children)


def _plain_block(block) -> str:
    if isinstance(block, Heading | Paragraph):
        return "".join(_plain_inline(block.children))
    if isinstance(block, BulletList | OrderedList):
        lines = []
        for item in block.items:
            body = "\n".join(_plain_block(child) for child in item.children)
            lines.append(f"{item.marker} {body}".rstrip())
        return "\n".join(lines)
    if isinstance(block, CodeBlock):
        return block.code.rstrip("\n")
    if isinstance(block, Blockquote):
        return "\n\n".join(_plain_block(child) for child in block.children)
    if isinstance(block, Table):
        return "\n".join(
            "\t".join("".join(_plain_inline(cell.children)) for cell in row) for row in block.rows
        )
    return ""


def _plain_inline(nodes: list) -> list[str]:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, Text):
            parts.append(node.text)
        elif isinstance(node, LineBreak):
            parts.append("\n")
        elif isinstance(node, InlineCode):
            parts.append(node.code)
        elif isinstance(node, Image):
            parts.append(node.alt)
        elif isinstance(node, Strong | Emphasis | Strikethrough | Link):
            parts.extend(_plain_inline(node.children))
    return parts
