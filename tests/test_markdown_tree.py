"""
Tests for Markdown tree parsing and visiting.
"""
import unittest

from wikigraph.markdown_tree import (
    BlockQuote,
    CodeBlock,
    DocumentNode,
    Emphasis,
    Heading,
    HtmlBlock,
    Image,
    InlineCode,
    Link,
    ListItem,
    NodeVisitor,
    Paragraph,
    Text,
    ThematicBreak,
    parse_inline,
    parse_markdown,
    plain_text,
    walk,
)


class TestBlockParsing(unittest.TestCase):
    def test_headings(self):
        root = parse_markdown("# Title\n\n## Sub section ##\n")
        headings = [n for n in root.children if isinstance(n, Heading)]
        self.assertEqual([h.level for h in headings], [1, 2])
        self.assertEqual([h.text for h in headings], ["Title", "Sub section"])

    def test_hash_without_space_is_paragraph(self):
        root = parse_markdown("#hashtag")
        self.assertIsInstance(root.children[0], Paragraph)

    def test_fenced_code_block(self):
        root = parse_markdown("Intro\n\n```include:java\nFoo.java\n```\n\nOutro")
        self.assertEqual(len(root.children), 3)
        block = root.children[1]
        self.assertIsInstance(block, CodeBlock)
        self.assertEqual(block.language, "include:java")
        self.assertEqual(block.body, "Foo.java")

    def test_fence_keeps_markdown_inside_verbatim(self):
        root = parse_markdown("~~~\n# not a heading\n[x](wiki/y)\n~~~")
        self.assertEqual(len(root.children), 1)
        self.assertEqual(root.children[0].body, "# not a heading\n[x](wiki/y)")
        self.assertEqual(root.children[0].language, "")

    def test_unterminated_fence_runs_to_end(self):
        root = parse_markdown("```python\nprint(1)\n")
        self.assertEqual(root.children[0].body, "print(1)")

    def test_block_quote_contains_blocks(self):
        root = parse_markdown("> quoted [link](wiki/a)\n> more\n\nafter")
        quote = root.children[0]
        self.assertIsInstance(quote, BlockQuote)
        links = [n for n, _ in walk(quote) if isinstance(n, Link)]
        self.assertEqual([l.url for l in links], ["wiki/a"])
        self.assertIsInstance(root.children[1], Paragraph)

    def test_list_items(self):
        root = parse_markdown("- one\n- [two](wiki/two)\n1. three")
        self.assertEqual([type(n) for n in root.children], [ListItem, ListItem, ListItem])
        self.assertFalse(root.children[0].ordered)
        self.assertTrue(root.children[2].ordered)

    def test_paragraph_lines_are_joined(self):
        root = parse_markdown("line one\nline two\n\nsecond")
        self.assertEqual(len(root.children), 2)
        self.assertEqual(plain_text(root.children[0]), "line one\nline two")

    def test_setext_headings(self):
        root = parse_markdown("Intro\n=====\n\nDetails\n-------\n")
        self.assertEqual([(h.level, h.text) for h in root.children], [(1, "Intro"), (2, "Details")])

    def test_heading_text_includes_inline_code(self):
        root = parse_markdown("## The `sort` function")
        self.assertEqual(root.children[0].text, "The sort function")

    def test_fence_nested_in_list_item(self):
        root = parse_markdown("- item\n\n    ```include:java\n    Foo.java\n    ```\n")
        item = root.children[0]
        self.assertIsInstance(item, ListItem)
        blocks = [n for n, _ in walk(item) if isinstance(n, CodeBlock)]
        self.assertEqual([(b.language, b.body) for b in blocks], [("include:java", "Foo.java")])

    def test_thematic_break(self):
        root = parse_markdown("above\n\n---\n\nbelow")
        self.assertEqual([type(n) for n in root.children], [Paragraph, ThematicBreak, Paragraph])


class TestInlineParsing(unittest.TestCase):
    def test_link_and_text(self):
        nodes = parse_inline("See [Page](wiki/page) now")
        self.assertEqual([type(n) for n in nodes], [Text, Link, Text])
        self.assertEqual(nodes[1].url, "wiki/page")
        self.assertEqual(plain_text(nodes[1]), "Page")

    def test_image_is_not_link(self):
        nodes = parse_inline("![Alt](img.png) and [Link](page)")
        self.assertIsInstance(nodes[0], Image)
        self.assertEqual(nodes[0].alt, "Alt")
        self.assertIsInstance(nodes[2], Link)

    def test_link_title(self):
        nodes = parse_inline('[a](http://x.org "X")')
        self.assertEqual(nodes[0].url, "http://x.org")
        self.assertEqual(nodes[0].title, "X")

    def test_inline_code_is_not_a_link(self):
        nodes = parse_inline("Write `[text](wiki/page-id)` here")
        self.assertEqual([type(n) for n in nodes], [Text, InlineCode, Text])
        self.assertEqual(nodes[1].code, "[text](wiki/page-id)")

    def test_link_inside_emphasis(self):
        nodes = parse_inline("**see [A](wiki/a)**")
        self.assertIsInstance(nodes[0], Emphasis)
        self.assertTrue(nodes[0].strong)
        links = [n for n, _ in walk(nodes[0]) if isinstance(n, Link)]
        self.assertEqual([l.url for l in links], ["wiki/a"])

    def test_reference_link_is_resolved(self):
        root = parse_markdown("See [A][ref].\n\n[ref]: wiki/alpha\n")
        links = [n for n, _ in walk(root) if isinstance(n, Link)]
        self.assertEqual([l.url for l in links], ["wiki/alpha"])

    def test_no_links(self):
        self.assertEqual(parse_inline("plain"), [Text(text="plain")])
        self.assertEqual(parse_inline(""), [])


def test_visitor_dispatches_on_exact_type():
    root = parse_markdown("# H\n\n[a](wiki/a) [b](http://b)\n\n```\ncode\n```")
    seen = []
    NodeVisitor({
        Link: lambda node, parent: seen.append(("link", node.url)),
        CodeBlock: lambda node, parent: seen.append(("code", node.body)),
    }).visit(root)
    assert seen == [("link", "wiki/a"), ("link", "http://b"), ("code", "code")]


def test_visitor_allows_replacing_nodes():
    root = parse_markdown("```x\n1\n```\n\n```x\n2\n```")

    def replace(node, parent):
        parent.replace_child(node, HtmlBlock(html=f"<b>{node.body}</b>"))

    NodeVisitor({CodeBlock: replace}).visit(root)
    assert [n.html for n in root.children] == ["<b>1</b>", "<b>2</b>"]


def test_replace_child_requires_identity():
    root = DocumentNode(children=[Text(text="a")])
    try:
        root.replace_child(Text(text="a"), Text(text="b"))
    except ValueError:
        pass
    else:
        raise AssertionError("equal but distinct node must not be replaced")
