from __future__ import annotations

from typing import Dict, Iterable, List

from scenario_splitter.model import Examples, GherkinStep, Step


TAG_PREFIX = '@'


def normalize_tag(tag: str) -> str:
    tag = tag.strip()
    if not tag.startswith(TAG_PREFIX):
        tag = f'{TAG_PREFIX}{tag}'

    return tag


def convert_tags(tags: Iterable[str]) -> List[str]:
    return [normalize_tag(tag) for tag in tags]


def convert_steps(steps: Iterable[GherkinStep]) -> List[Step]:
    converted: List[Step] = []

    for step in steps:
        name = f'{step.keyword} {step.text}' if step.keyword else step.text
        converted.append(Step(name, data_table=step.table, doc_string=step.doc_string))

    return converted


def convert_example_table(examples: Examples) -> Dict[str, List[str]]:
    """Map each example column, as the `<header>` placeholder it replaces, to its values in row order."""
    example_map: Dict[str, List[str]] = {}

    for index, heading in enumerate(examples.headings):
        example_map[f'<{heading}>'] = [row[index] for row in examples.rows]

    return example_map
