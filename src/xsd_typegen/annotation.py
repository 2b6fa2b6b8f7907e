# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Documentation nodes rendered as TSDoc comments."""

from __future__ import annotations

import inspect
from typing import Any

from .utils import prefix_lines
from .xml_tree import TEXT_KEY, as_list


class Annotations:
    """Ordered documentation strings collected from xs:annotation nodes.

    Example:
        >>> Annotations(['First line', 'Second entry']).render_doc()
        ' * First line\\n *\\n * Second entry'
    """

    def __init__(self, documentation: list[str]):
        self.documentation = documentation

    def __bool__(self) -> bool:
        return bool(self.documentation)

    def __repr__(self) -> str:
        return f"Annotations({self.documentation!r})"

    @classmethod
    def from_tree(cls, node: Any) -> Annotations:
        """Collect documentation texts from one or many annotation nodes.

        Documentation with attributes (e.g. xml:lang) keeps its text under '#text'.
        """
        documentation: list[str] = []
        for annotation in as_list(node):
            if not isinstance(annotation, dict):
                continue
            for doc in as_list(annotation.get("documentation")):
                text = doc.get(TEXT_KEY, "") if isinstance(doc, dict) else doc
                if text:
                    documentation.append(inspect.cleandoc(text))
        return cls(documentation)

    def render_doc(self) -> str:
        """Render the comment body: one ' * '-prefixed block per entry, blank doc line between."""
        return "\n *\n".join(
            prefix_lines(text.replace("*/", "*\\/"), " * ") for text in self.documentation
        )

    def render_comment(self) -> str:
        """Render a complete '/** ... */' block followed by a newline."""
        return f"/**\n{self.render_doc()}\n */\n"
