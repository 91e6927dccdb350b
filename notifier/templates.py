"""
Built-in notification templates and the engine that renders them.

Grammar (deliberately small, shared with ntfy's server-side templates):

  {{.key}}               replaced by the value of ``data[key]``, or by nothing
                         when the key is absent
  {{if .key}}...{{end}}  the enclosed text is kept only when ``data[key]`` is
                         truthy; otherwise the whole span, tags included, goes

Rendering is two passes: variables first, then conditional blocks. Blocks do
not nest; each ``{{if}}`` is closed by the first ``{{end}}`` after it. Text that
came from ``data`` is never read as markup by the second pass.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from notifier.channels.format_value import format_value
from notifier.exceptions import TemplateNotFound

_VAR_OPEN = "{{."
_IF_OPEN = "{{if ."
_END = "{{end}}"
_CLOSE = "}}"

# [start, end) offsets of substituted values in the first-pass output
Span = tuple[int, int]


@dataclass(frozen=True)
class Template:
    title: str
    message: str


TEMPLATES: Mapping[str, Template] = MappingProxyType({
    "status": Template(
        title="Status Update: {{.status}}",
        message="""
Status: {{.status}}
{{if .details}}Details: {{.details}}{{end}}
{{if .timestamp}}Time: {{.timestamp}}{{end}}
{{if .component}}Component: {{.component}}{{end}}
""",
    ),
    "question": Template(
        title="Question: {{.question}}",
        message="""
Question: {{.question}}
{{if .context}}Context: {{.context}}{{end}}
{{if .options}}Options: {{.options}}{{end}}
{{if .deadline}}Response needed by: {{.deadline}}{{end}}
""",
    ),
    "progress": Template(
        title="Progress: {{.title}}",
        message="""
Task: {{.title}}
Progress: {{.current}}/{{.total}}{{if .percentage}} ({{.percentage}}%){{end}}
{{if .eta}}ETA: {{.eta}}{{end}}
{{if .details}}Details: {{.details}}{{end}}
""",
    ),
    "problem": Template(
        title="Problem: {{.title}}",
        message="""
Error: {{.title}}
{{if .description}}Description: {{.description}}{{end}}
{{if .severity}}Severity: {{.severity}}{{end}}
{{if .source}}Source: {{.source}}{{end}}
{{if .timestamp}}Time: {{.timestamp}}{{end}}
{{if .solution}}Suggested Solution: {{.solution}}{{end}}
""",
    ),
})


def get_template(name: str) -> Optional[Template]:
    return TEMPLATES.get(name)


def has_template(name: Optional[str]) -> bool:
    return name is not None and name in TEMPLATES


def list_template_names() -> list[str]:
    return list(TEMPLATES)


def _is_key(key: str) -> bool:
    return bool(key) and all(ch.isalnum() or ch == "_" for ch in key)


def _substitute_variables(text: str, data: Mapping[str, Any]) -> tuple[str, list[Span]]:
    """Replace ``{{.key}}`` tags; also return where each substituted value landed."""
    out = []
    spans: list[Span] = []
    length = 0
    pos = 0
    while True:
        start = text.find(_VAR_OPEN, pos)
        if start == -1:
            break
        end = text.find(_CLOSE, start)
        if end == -1:
            break
        key = text[start + len(_VAR_OPEN):end]
        out.append(text[pos:start])
        length += start - pos
        if _is_key(key):
            piece = format_value(data.get(key))
            spans.append((length, length + len(piece)))
        else:
            piece = text[start:end + len(_CLOSE)]
        out.append(piece)
        length += len(piece)
        pos = end + len(_CLOSE)
    out.append(text[pos:])
    return "".join(out), spans


def _find_tag(text: str, tag: str, pos: int, spans: Sequence[Span]) -> int:
    """Index of the next ``tag`` at or after ``pos`` that is not part of a substituted value."""
    while True:
        index = text.find(tag, pos)
        if index == -1:
            return -1
        if not any(start < index + len(tag) and index < end for start, end in spans):
            return index
        pos = index + 1


def _drop_stray_ends(text: str, start: int, stop: int, spans: Sequence[Span]) -> str:
    out = []
    pos = start
    while True:
        index = _find_tag(text, _END, pos, spans)
        if index == -1 or index + len(_END) > stop:
            break
        out.append(text[pos:index])
        pos = index + len(_END)
    out.append(text[pos:stop])
    return "".join(out)


def _evaluate_conditionals(text: str, data: Mapping[str, Any], spans: Sequence[Span] = ()) -> str:
    """Resolve ``{{if .key}}...{{end}}`` blocks; tags inside ``spans`` are plain text."""
    out = []
    pos = 0
    while True:
        start = _find_tag(text, _IF_OPEN, pos, spans)
        if start == -1:
            break
        tag_end = _find_tag(text, _CLOSE, start, spans)
        if tag_end == -1:
            break
        key = text[start + len(_IF_OPEN):tag_end].strip()
        out.append(_drop_stray_ends(text, pos, start, spans))
        block_end = _find_tag(text, _END, tag_end, spans)
        if block_end == -1:
            # Unterminated block: drop the opening tag, keep the text
            pos = tag_end + len(_CLOSE)
            continue
        if data.get(key):
            out.append(text[tag_end + len(_CLOSE):block_end])
        pos = block_end + len(_END)
    out.append(_drop_stray_ends(text, pos, len(text), spans))
    return "".join(out)


def render(text: Optional[str], data: Optional[Mapping[str, Any]] = None) -> str:
    """Render a template string against ``data``."""
    if not text:
        return ""
    data = data or {}
    substituted, spans = _substitute_variables(text, data)
    return _evaluate_conditionals(substituted, data, spans)


def apply_template(name: str, data: Optional[Mapping[str, Any]] = None) -> Template:
    """
    Render the named built-in template.

    Raises:
        TemplateNotFound: if ``name`` is not a built-in template.
    """
    template = get_template(name)
    if template is None:
        raise TemplateNotFound(name)
    return Template(title=render(template.title, data), message=render(template.message, data))


def apply_card_template(name: str, data: Optional[Mapping[str, Any]] = None) -> Template:
    """Like :func:`apply_template`, trimmed for chat cards (Discord, Slack)."""
    applied = apply_template(name, data)
    return Template(title=applied.title.strip(), message=applied.message.strip())
