from pydoku.models.context import Footnote, FootnoteRegistry, Heading, ParseContext
from pydoku.models.nodes import (
    Node, Text, Escape, Raw, Entity, LineBreak, Image, FootnoteRef,
    Container, Strong, Emphasis, Underline, Monospace, Subscript, Superscript, Deleted, Link,
    plain_text,
)

__all__ = [
    "Footnote", "FootnoteRegistry", "Heading", "ParseContext",
    "Node", "Text", "Escape", "Raw", "Entity", "LineBreak", "Image", "FootnoteRef",
    "Container", "Strong", "Emphasis", "Underline", "Monospace", "Subscript", "Superscript",
    "Deleted", "Link",
    "plain_text",
]
