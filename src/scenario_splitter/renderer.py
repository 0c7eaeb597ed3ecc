from __future__ import annotations

from typing import Dict, List, Sequence
from pathlib import Path

from behave.i18n import languages
from jinja2 import Environment

from scenario_splitter.model import SingleScenario, Step


FEATURE_TEMPLATE = '''\
{% if language != 'en' %}
# language: {{ language }}
{% endif %}
{% if feature_tags %}
{{ feature_tags | join(' ') }}
{% endif %}
{{ keywords.feature }}: {{ feature_name }}
{% if background_steps %}

  {{ keywords.background }}:
{{ render_steps(background_steps) }}
{% endif %}

{% if scenario_tags %}
  {{ scenario_tags | join(' ') }}
{% endif %}
  {{ keywords.scenario }}: {{ scenario_name }}
{{ render_steps(steps) }}
'''

STEP_INDENT = ' ' * 4
ARGUMENT_INDENT = ' ' * 6
DOC_STRING_DELIMITERS = ('"""', "'''")
DEFAULT_KEYWORDS = {'feature': 'Feature', 'background': 'Background', 'scenario': 'Scenario'}


def get_keywords(language: str) -> Dict[str, str]:
    """Get the block keywords used when rendering a feature in `language`."""
    keywords: Dict[str, str] = {}

    for keyword, default in DEFAULT_KEYWORDS.items():
        values = [value.strip() for value in languages[language][keyword]]
        # languages can have more than one word for a keyword, use the default if it is one of them
        keywords[keyword] = default if default in values else values[0]

    return keywords


def _escape_cell(cell: str) -> str:
    return cell.replace('|', '\\|')


def _format_table(rows: Sequence[Sequence[str]]) -> List[str]:
    escaped_rows = [[_escape_cell(cell) for cell in row] for row in rows]
    widths = [max(len(row[index]) for row in escaped_rows) for index in range(len(escaped_rows[0]))]

    return [
        f'{ARGUMENT_INDENT}| ' + ' | '.join(cell.ljust(widths[index]) for index, cell in enumerate(row)) + ' |'
        for row in escaped_rows
    ]


def _doc_string_delimiter(doc_string: str) -> str:
    # a doc string ends on the first line starting with its delimiter
    lines = [line.strip() for line in doc_string.splitlines()]

    for delimiter in DOC_STRING_DELIMITERS:
        if not any(line.startswith(delimiter) for line in lines):
            return delimiter

    raise ValueError(f'doc string contains lines starting with both {" and ".join(DOC_STRING_DELIMITERS)}')


def render_steps(steps: Sequence[Step]) -> str:
    buffer: List[str] = []

    for step in steps:
        buffer.append(f'{STEP_INDENT}{step.name}')

        if step.data_table:
            buffer.extend(_format_table(step.data_table))

        if step.doc_string is not None:
            delimiter = _doc_string_delimiter(step.doc_string)
            buffer.append(f'{ARGUMENT_INDENT}{delimiter}')
            buffer.extend(f'{ARGUMENT_INDENT}{line}' if line else '' for line in step.doc_string.splitlines())
            buffer.append(f'{ARGUMENT_INDENT}{delimiter}')

    return '\n'.join(buffer)


def _create_environment() -> Environment:
    environment = Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)
    environment.globals.update(render_steps=render_steps)

    return environment


def render_scenario(single_scenario: SingleScenario) -> str:
    """Render a single scenario as the content of a standalone feature file.

    Block keywords are written in the language of the feature the scenario came from, step keywords are
    part of the step names and are kept as written.
    """
    environment = _create_environment()

    template = environment.from_string(FEATURE_TEMPLATE)

    return template.render(
        language=single_scenario.language,
        keywords=get_keywords(single_scenario.language),
        feature_name=single_scenario.feature_name,
        feature_tags=single_scenario.feature_tags,
        background_steps=single_scenario.background_steps,
        scenario_name=single_scenario.scenario_name,
        scenario_tags=single_scenario.scenario_tags or [],
        steps=single_scenario.steps or [],
    )


def scenario_file_name(feature_path: Path, index: int) -> str:
    return f'{feature_path.stem}_scenario{index:03d}.feature'
