"""
Prompt and context rendering with the Jinja2 templates in report/templates.

The context only ever contains sections for the data kinds that were fetched, so a
question about tickets never shows the model anything about code activity.
"""

import os
from datetime import datetime
from typing import Dict, List, Any, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from normalize.util import decorate
from storage.cache import DataKind

_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), 'templates')
_env = Environment(loader=FileSystemLoader(_TEMPLATE_DIR), autoescape=select_autoescape(['html', 'xml']), keep_trailing_newline=True)

# report order: tickets first, then open work in review, then raw commits
SECTION_ORDER = [DataKind.ISSUES, DataKind.REVIEWS, DataKind.COMMITS]

HEADINGS = {
    DataKind.ISSUES: 'JIRA DATA (Active Issues)',
    DataKind.REVIEWS: 'GITHUB DATA (Open Pull Requests)',
    DataKind.COMMITS: 'GITHUB DATA (Commits in the last 7 days)',
}

_FOCUS = {
    DataKind.ISSUES: 'Talk only about the JIRA tickets listed.',
    DataKind.REVIEWS: 'Talk only about the pull requests listed.',
    DataKind.COMMITS: 'Talk only about the commits listed.',
}

_IDENTIFIERS = {
    DataKind.ISSUES: 'ticket keys (e.g. TS-102) with title, priority and status',
    DataKind.REVIEWS: 'pull request numbers and titles with their repository',
    DataKind.COMMITS: 'commit messages with their repository',
}


def render_intent_prompt(question: str) -> str:
    return _env.get_template('intent_prompt.txt.j2').render(question=question)


def _section_record(kind: DataKind, record, now: datetime) -> Dict[str, Any]:
    data = decorate(record, now)
    if kind is DataKind.COMMITS:
        lines = (data.get('message') or '').splitlines()
        data['headline'] = lines[0] if lines else ''
    return data


def build_sections(records_by_kind: Dict[DataKind, Sequence[Any]], now: datetime) -> List[Dict[str, Any]]:
    """Decorate every record with relativeTime and group them into ordered sections."""
    sections = []
    for kind in SECTION_ORDER:
        if kind not in records_by_kind:
            continue
        sections.append({
            'kind': kind.value,
            'heading': HEADINGS[kind],
            'records': [_section_record(kind, r, now) for r in records_by_kind[kind]],
        })
    return sections


def render_context(records_by_kind: Dict[DataKind, Sequence[Any]], now: datetime) -> str:
    """Render the data block handed to the summarizer."""
    return _env.get_template('context.txt.j2').render(sections=build_sections(records_by_kind, now))


def render_summary_prompt(question: str, identity, records_by_kind: Dict[DataKind, Sequence[Any]], now: datetime) -> str:
    kinds = [k for k in SECTION_ORDER if k in records_by_kind]
    if len(kinds) == 1:
        focus = _FOCUS[kinds[0]]
    else:
        focus = 'Include everything listed above, briefly.'
    identifiers = '; '.join(_IDENTIFIERS[k] for k in kinds)
    return _env.get_template('summary_prompt.txt.j2').render(
        question=question,
        identity=identity,
        context=render_context(records_by_kind, now),
        focus=focus,
        identifiers=identifiers,
    )
