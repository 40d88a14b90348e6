"""Text summary of a display tree rendered with Jinja2.

Each row of the template context describes one node, pre-order:
- depth: nesting level (0 for roots)
- label: projection label (``[icon ]name[ - size]``)
- size: formatted total size (empty for zero bytes)
- percent: completion as shown in the client ("42%" or a check mark)
- node: the DisplayNode itself

Example:
    >>> renderer = SummaryRenderer(add_icons=False)
    >>> print(renderer.render(build_tree(records)))
    a - 2.0M  50%
      x.txt - 1.0M  ✓
      y.txt - 1.0M  0%
"""

from typing import Any, Dict, Iterable, List, Optional

import jinja2

from torrtree.core.formatting import format_percent_done, format_size
from torrtree.tree.display import DisplayNode, iter_nodes
from torrtree.tree.projection import DisplayProjection

DEFAULT_TEMPLATE = (
    "{% for row in rows %}"
    "{{ indent * row.depth }}{{ row.label }}  {{ row.percent }}\n"
    "{% endfor %}"
)


class SummaryError(Exception):
    """Raised when the summary template cannot be rendered."""


class SummaryRenderer:
    """Renders DisplayNode trees through a Jinja2 template."""

    def __init__(
        self,
        template: Optional[str] = None,
        add_icons: bool = False,
        indent: str = "  ",
        **jinja_options,
    ):
        """Initialize the renderer.

        Args:
            template: Jinja2 template source (defaults to DEFAULT_TEMPLATE)
            add_icons: Decorate labels with icons
            indent: String repeated once per depth level
            **jinja_options: Additional Jinja2 environment options
        """
        self.projection = DisplayProjection(add_icons=add_icons)
        self.indent = indent
        self._env = jinja2.Environment(**jinja_options)

        try:
            self._template = self._env.from_string(template or DEFAULT_TEMPLATE)
        except jinja2.TemplateSyntaxError as e:
            raise SummaryError(f"Invalid summary template: {e}")

    def rows(self, nodes: Iterable[DisplayNode]) -> List[Dict[str, Any]]:
        """Flatten a tree into template rows."""
        return [
            {
                "depth": depth,
                "label": self.projection.label(node),
                "size": format_size(node.size),
                "percent": format_percent_done(node.progress),
                "node": node,
            }
            for depth, node in iter_nodes(nodes)
        ]

    def render(self, nodes: Iterable[DisplayNode], **context) -> str:
        """Render the summary.

        Args:
            nodes: Root display nodes
            **context: Extra template variables

        Raises:
            SummaryError: If rendering fails
        """
        try:
            return self._template.render(rows=self.rows(nodes), indent=self.indent, **context)
        except jinja2.TemplateError as e:
            raise SummaryError(f"Template error: {e}")
