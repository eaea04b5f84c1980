"""HTML rendering of questions for the console's preview panes."""

from __future__ import annotations

from collections.abc import Sequence

from exam_app.core.markdown_math_renderer import renderer
from exam_app.core.models import Question


def render_question_with_options(
    question_text: str,
    options: Sequence[tuple[str, bool]],
    *,
    show_correct: bool = True,
    font_size: int = 14,
) -> str:
    """Render a question and its lettered options as a MathJax document.

    Args:
        question_text: The question text (supports Markdown and LaTeX)
        options: ``(text, is_correct)`` pairs in display order
        show_correct: Highlight the options flagged correct
        font_size: Font size in points

    Returns:
        HTML string ready for display in QWebEngineView
    """
    parts = [renderer.render_fragment(question_text or "(No question text)")]
    for index, (text, is_correct) in enumerate(options):
        letter = chr(ord("A") + index)
        css = ' class="correct"' if show_correct and is_correct else ""
        marker = " &#10003;" if show_correct and is_correct else ""
        body = renderer.render_inline(text) if text.strip() else "<em>(empty)</em>"
        parts.append(f"<p{css}><strong>{letter}.</strong> {body}{marker}</p>")
    return renderer.wrap_with_mathjax("\n".join(parts), font_size=font_size)


def render_exam(questions: Sequence[Question], font_size: int = 12) -> str:
    """Render every question of an exam, answer key included."""
    if not questions:
        return renderer.wrap_with_mathjax("<p><em>No questions.</em></p>", font_size=font_size)

    parts: list[str] = []
    for number, question in enumerate(questions, start=1):
        parts.append(f"<h3>Question {number}</h3>")
        parts.append(renderer.render_fragment(question.text))
        for index, option in enumerate(question.options):
            letter = chr(ord("A") + index)
            css = ' class="correct"' if option.is_correct else ""
            parts.append(
                f"<p{css}><strong>{letter}.</strong> {renderer.render_inline(option.text)}</p>"
            )
    return renderer.wrap_with_mathjax("\n".join(parts), font_size=font_size)
