"""Markdown + LaTeX rendering helpers shared by Qt and web clients.

Question text, options and explanations produced by the generator are
markdown that may contain inline math. The renderer turns them into HTML and
leaves the math to MathJax at display time, so the desktop view and the
browser page render identically.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line (an option label) without the wrapping paragraph."""

        return self._markdown.renderInline((markdown_text or "").strip())

    def wrap_with_mathjax(self, body_html: str, title: str = "QuizGen", font_size: int = 14) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{title}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; }}
      .quiz-html {{ font-size: {font_size}pt; line-height: 1.5; }}
      .correct {{ color: #107C10; font-weight: 600; }}
      .wrong {{ color: #D13438; font-weight: 600; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"quiz-html\">{body_html}</div>
  </body>
</html>"""


renderer = MarkdownMathRenderer()
# Shared instance; MarkdownIt renders are read-only, so the API threads and the
# Qt thread can reuse it.
