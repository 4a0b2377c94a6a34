"""
Parsed Markdown document tree used by the preprocessing pipeline.

Pages are parsed with markdown-it-py (CommonMark) and converted into a closed
set of node dataclasses the preprocessors can inspect and rewrite in place:

Block nodes:
    DocumentNode, Heading, Paragraph, BlockQuote, ListItem, CodeBlock,
    HtmlBlock, ThematicBreak
Inline nodes:
    Text, InlineCode, Emphasis, HtmlInline, Link, Image

Rendering the tree to HTML is left to downstream renderers.

Preprocessors walk the tree with ``NodeVisitor``, which dispatches on the exact
node type through a handler table:

    >>> visitor = NodeVisitor({Link: lambda node, parent: print(node.url)})
    >>> visitor.visit(parse_markdown("See [page](wiki/foo)."))
    wiki/foo
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Type

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode


@dataclass
class Node:
    """Base class for all tree nodes."""
    children: List["Node"] = field(default_factory=list)

    def replace_child(self, old: "Node", new: "Node") -> None:
        """Replace ``old`` (matched by identity) with ``new``."""
        for index, child in enumerate(self.children):
            if child is old:
                self.children[index] = new
                return
        raise ValueError(f"{old!r} is not a child of {self!r}")


@dataclass
class DocumentNode(Node):
    pass


@dataclass
class Heading(Node):
    level: int = 1
    anchor: Optional[str] = None

    @property
    def text(self) -> str:
        return plain_text(self)


@dataclass
class Paragraph(Node):
    pass


@dataclass
class BlockQuote(Node):
    pass


@dataclass
class ListItem(Node):
    ordered: bool = False


@dataclass
class CodeBlock(Node):
    language: str = ""
    body: str = ""


@dataclass
class HtmlBlock(Node):
    html: str = ""


@dataclass
class ThematicBreak(Node):
    pass


@dataclass
class Text(Node):
    text: str = ""


@dataclass
class InlineCode(Node):
    code: str = ""


@dataclass
class Emphasis(Node):
    strong: bool = False


@dataclass
class HtmlInline(Node):
    html: str = ""


@dataclass
class Link(Node):
    url: str = ""
    title: Optional[str] = None


@dataclass
class Image(Node):
    url: str = ""
    alt: str = ""


Handler = Callable[[Node, Node], None]


class NodeVisitor:
    """
    Depth-first walker dispatching on exact node type.

    Handlers receive ``(node, parent)`` and may replace ``node`` in
    ``parent.children``; the walk iterates over a snapshot of each child list,
    so a replaced node's original subtree is still visited but the replacement
    is not.
    """

    def __init__(self, handlers: Dict[Type[Node], Handler]):
        self.handlers = handlers

    def visit(self, root: Node) -> None:
        for node, parent in walk(root):
            handler = self.handlers.get(type(node))
            if handler is not None:
                handler(node, parent)


def walk(root: Node) -> Iterator[Tuple[Node, Node]]:
    """Yield ``(node, parent)`` pairs in document order, excluding ``root``."""
    for child in list(root.children):
        yield child, root
        yield from walk(child)


def plain_text(node: Node) -> str:
    """Concatenate the text of all ``Text`` and ``InlineCode`` descendants of ``node``."""
    if isinstance(node, Text):
        return node.text
    if isinstance(node, InlineCode):
        return node.code
    return "".join(plain_text(child) for child in node.children)


# Shared by all threads; parse state is created per call
_parser = MarkdownIt("commonmark")


def parse_markdown(text: str) -> DocumentNode:
    """
    Parse Markdown source into a ``DocumentNode`` tree.

    Args:
        text: Raw Markdown source

    Returns:
        Root node of the parsed tree
    """
    syntax_tree = SyntaxTreeNode(_parser.parse(text))
    return DocumentNode(children=_convert_blocks(syntax_tree.children))


def parse_inline(text: str) -> List[Node]:
    """Parse a single line of inline Markdown into inline nodes."""
    syntax_tree = SyntaxTreeNode(_parser.parseInline(text))
    nodes: List[Node] = []
    for inline in syntax_tree.children:
        nodes.extend(_convert_inlines(inline.children))
    return nodes


def _convert_blocks(syntax_nodes: List[SyntaxTreeNode], ordered: bool = False) -> List[Node]:
    blocks: List[Node] = []

    for syntax_node in syntax_nodes:
        node_type = syntax_node.type

        if node_type == "heading":
            blocks.append(Heading(
                level=int(syntax_node.tag[1:]),
                children=_convert_inline_container(syntax_node),
            ))
        elif node_type == "paragraph":
            blocks.append(Paragraph(children=_convert_inline_container(syntax_node)))
        elif node_type == "blockquote":
            blocks.append(BlockQuote(children=_convert_blocks(syntax_node.children)))
        elif node_type in ("bullet_list", "ordered_list"):
            # items are flattened into the parent, each remembering its list kind
            blocks.extend(_convert_blocks(syntax_node.children, ordered=node_type == "ordered_list"))
        elif node_type == "list_item":
            blocks.append(ListItem(ordered=ordered, children=_convert_blocks(syntax_node.children)))
        elif node_type == "fence":
            blocks.append(CodeBlock(language=syntax_node.info.strip(), body=_strip_newline(syntax_node.content)))
        elif node_type == "code_block":
            blocks.append(CodeBlock(body=_strip_newline(syntax_node.content)))
        elif node_type == "html_block":
            blocks.append(HtmlBlock(html=syntax_node.content))
        elif node_type == "hr":
            blocks.append(ThematicBreak())
        elif node_type == "inline":
            blocks.append(Paragraph(children=_convert_inlines(syntax_node.children)))
        else:
            blocks.extend(_convert_blocks(syntax_node.children))

    return blocks


def _convert_inline_container(syntax_node: SyntaxTreeNode) -> List[Node]:
    nodes: List[Node] = []
    for inline in syntax_node.children:
        nodes.extend(_convert_inlines(inline.children))
    return nodes


def _convert_inlines(syntax_nodes: List[SyntaxTreeNode]) -> List[Node]:
    nodes: List[Node] = []

    for syntax_node in syntax_nodes:
        node_type = syntax_node.type

        if node_type == "text":
            nodes.append(Text(text=syntax_node.content))
        elif node_type in ("softbreak", "hardbreak"):
            nodes.append(Text(text="\n"))
        elif node_type == "code_inline":
            nodes.append(InlineCode(code=syntax_node.content))
        elif node_type in ("em", "strong"):
            nodes.append(Emphasis(
                strong=node_type == "strong",
                children=_convert_inlines(syntax_node.children),
            ))
        elif node_type == "html_inline":
            nodes.append(HtmlInline(html=syntax_node.content))
        elif node_type == "link":
            title = syntax_node.attrs.get("title")
            nodes.append(Link(
                url=str(syntax_node.attrs.get("href", "")),
                title=str(title) if title is not None else None,
                children=_convert_inlines(syntax_node.children),
            ))
        elif node_type == "image":
            nodes.append(Image(url=str(syntax_node.attrs.get("src", "")), alt=syntax_node.content))
        elif syntax_node.children:
            nodes.extend(_convert_inlines(syntax_node.children))
        elif syntax_node.content:
            nodes.append(Text(text=syntax_node.content))

    return nodes


def _strip_newline(content: str) -> str:
    return content[:-1] if content.endswith("\n") else content
