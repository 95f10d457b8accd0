"""Rendering of the blueprint catalog as a table, CSV or documentation HTML."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TextIO
from urllib.parse import quote

import jinja2

from bptools.github import GCP_ORG, TF_MODULES_ORG, Repository

E2E_LABEL = "end-to-end"

_GITHUB_WEB = "https://github.com"

TOPIC_TO_CATEGORY = {
    E2E_LABEL: "End-to-end",
    "healthcare-life-sciences": "Healthcare and life sciences",
    "serverless-computing": "Serverless computing",
    "compute": "Compute",
    "containers": "Containers",
    "databases": "Databases",
    "networking": "Networking",
    "data-analytics": "Data analytics",
    "storage": "Storage",
    "operations": "Operations",
    "developer-tools": "Developer tools",
    "security-identity": "Security and identity",
    "workspace": "Workspace",
}


class RenderFormat(enum.Enum):
    """Output formats of the catalog."""

    TABLE = "table"
    CSV = "csv"
    HTML = "html"

    @classmethod
    def parse(cls, value: "str | RenderFormat") -> "RenderFormat":
        """Return the format named by value, raising ValueError for unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            options = "[" + " ".join(member.value for member in cls) + "]"
            raise ValueError(f"one of {options} expected. unknown format: {value}") from None


@dataclass
class DisplayMeta:
    """Display data for one blueprint."""

    name: str = ""
    display_name: str = ""
    stars: str = ""
    created_at: str = ""
    description: str = ""
    labels: list[str] | None = None
    url: str = ""
    categories: str = ""
    is_e2e: bool = False


# blueprints shown in the documentation that are not discovered automatically
STATIC_DISPLAY_META: tuple[DisplayMeta, ...] = (
    DisplayMeta(
        display_name="fabric",
        url=f"{_GITHUB_WEB}/{TF_MODULES_ORG}/cloud-foundation-fabric",
        categories="End to end",
        is_e2e=True,
        description="Advanced examples designed for prototyping",
    ),
    DisplayMeta(
        display_name="ai-notebook",
        url=f"{_GITHUB_WEB}/{GCP_ORG}/notebooks-blueprint-security",
        categories="End to end, Data analytics",
        is_e2e=True,
        description="Protect confidential data in Vertex AI Workbench notebooks",
    ),
)

_HTML_REPLACEMENTS = {
    "\0": "\ufffd",
    '"': "&#34;",
    "&": "&amp;",
    "'": "&#39;",
    "+": "&#43;",
    "<": "&lt;",
    ">": "&gt;",
}

_SAFE_URL_SCHEMES = ("http", "https", "mailto")
_URL_SAFE_CHARS = "!#$&*+,/:;=?@[]%"

_HTML_TEMPLATE = """<table>
<thead>
    <tr>
      <th>Category</th>
      <th>Blueprint</th>
      <th>Description</th>
    </tr>
  </thead>
<tbody class="list">
{% for item in items %}{% if item.categories %}
<tr>
      <td>{{ item.categories | html_text }}</td>
      <td><a
href="{{ item.url | html_url }}" class="external">{{ item.display_name | html_text }}</a></td>
      <td>{{ item.description | html_text }}</td>
</tr>
{% endif %}{% endfor %}
</tbody>
</table>"""


def _html_text(value: Any) -> str:
    return "".join(_HTML_REPLACEMENTS.get(char, char) for char in str(value))


def _html_url(value: Any) -> str:
    url = str(value)
    colon = url.find(":")
    if colon >= 0 and "/" not in url[:colon]:
        if url[:colon].lower() not in _SAFE_URL_SCHEMES:
            return "#ZgotmplZ"
    return _html_text(quote(url, safe=_URL_SAFE_CHARS))


_ENV = jinja2.Environment(autoescape=False)
_ENV.filters["html_text"] = _html_text
_ENV.filters["html_url"] = _html_url
_DOC_TEMPLATE = _ENV.from_string(_HTML_TEMPLATE)


def _format_date(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def _strip_prefix(text: str, prefix: str) -> str:
    return text[len(prefix):] if text.startswith(prefix) else text


def repos_to_display_meta(repos: Iterable[Repository]) -> list[DisplayMeta]:
    """Convert repositories into display data, mapping topics to categories."""
    result = []
    for repo in repos:
        display_name = _strip_prefix(repo.name, "terraform-google-")
        display_name = _strip_prefix(display_name, "terraform-")
        topics = repo.topics or []
        categories = sorted(
            TOPIC_TO_CATEGORY[topic] for topic in topics if topic in TOPIC_TO_CATEGORY
        )
        result.append(
            DisplayMeta(
                name=repo.name,
                display_name=display_name,
                url=repo.html_url,
                stars=str(repo.stargazers_count),
                created_at=_format_date(repo.created),
                description=repo.description,
                labels=repo.topics,
                categories=", ".join(categories),
                is_e2e=E2E_LABEL in topics,
            )
        )
    return result


def doc_sort(items: list[DisplayMeta]) -> list[DisplayMeta]:
    """Sort in place, end-to-end blueprints first and by name; others keep their order."""
    items.sort(key=lambda item: (not item.is_e2e, item.display_name if item.is_e2e else ""))
    return items


def render_doc_html(items: Iterable[DisplayMeta]) -> str:
    """Render documentation HTML for the blueprints that have categories."""
    ordered = items if isinstance(items, list) else list(items)
    return _DOC_TEMPLATE.render(items=doc_sort(ordered))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _render_table(header: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    numeric = [all(_is_number(row[col]) for row in rows) for col in range(len(header))]
    head = [text.upper() for text in header]
    body = [[str(cell) for cell in row] for row in rows]
    widths = [
        max([len(head[col])] + [len(row[col]) for row in body]) for col in range(len(head))
    ]

    def line(cells: Sequence[str]) -> str:
        padded = (
            cell.rjust(width) if is_num else cell.ljust(width)
            for cell, width, is_num in zip(cells, widths, numeric)
        )
        return "| " + " | ".join(padded) + " |"

    rule = "+" + "+".join("-" * (width + 2) for width in widths) + "+"
    lines = [rule, line(head), rule, *(line(row) for row in body), rule]
    return "\n".join(lines)


def _csv_cell(value: Any) -> str:
    text = str(value)
    if any(char in text for char in '",'):
        return '"' + text.replace('"', '\\"') + '"'
    return text


def _render_csv(header: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    return "\n".join(",".join(_csv_cell(cell) for cell in row) for row in [header, *rows])


def render(
    repos: Sequence[Repository],
    out: TextIO,
    render_format: "str | RenderFormat",
    verbose: bool = False,
) -> None:
    """Write the repositories to out in the given format."""
    render_format = RenderFormat.parse(render_format)
    if render_format is RenderFormat.HTML:
        items = repos_to_display_meta(repos) + [
            DisplayMeta(**vars(item)) for item in STATIC_DISPLAY_META
        ]
        out.write(render_doc_html(items))
        return

    header = ["Repo", "Stars", "Created"]
    if verbose:
        header.append("Description")
    rows = []
    for repo in repos:
        row: list[Any] = [repo.name, repo.stargazers_count, _format_date(repo.created)]
        if verbose:
            row.append(repo.description)
        rows.append(row)

    if render_format is RenderFormat.TABLE:
        out.write(_render_table(header, rows) + "\n")
    else:
        out.write(_render_csv(header, rows) + "\n")