from __future__ import annotations

import re
import logging

from typing import Dict, List, Optional, Sequence, cast

from scenario_splitter.converter import convert_example_table, convert_steps, convert_tags
from scenario_splitter.model import (
    DefinitionKind,
    Document,
    ParseError,
    Scenario,
    ScenarioOutline,
    SingleScenario,
    Step,
)
from scenario_splitter.parser import parse


logger = logging.getLogger(__name__)


def scenario_should_be_included(
    scenario_tags: Optional[Sequence[str]],
    include_tags: Optional[Sequence[str]],
    exclude_tags: Optional[Sequence[str]],
) -> bool:
    """Check if a scenario should be generated, based on its tags.

    Any scenario tag matching an exclude tag vetoes the scenario. Otherwise, if there are include tags,
    at least one scenario tag must match one of them. Matching is case-insensitive.

    A scenario without tags is only included when there are no include tags.
    """
    logger.debug(f'scenario tags: {scenario_tags}, include tags: {include_tags}, exclude tags: {exclude_tags}')

    include = [tag.lower() for tag in include_tags or []]
    exclude = [tag.lower() for tag in exclude_tags or []]

    if not scenario_tags:
        return len(include) < 1

    result = False
    for scenario_tag in scenario_tags:
        scenario_tag = scenario_tag.lower()

        if len(include) < 1 or scenario_tag in include:
            result = True

        if scenario_tag in exclude:
            return False

    return result


def substitute_step_placeholders(steps: List[Step], example_map: Dict[str, List[str]], row_index: int) -> List[Step]:
    """Replace `<header>` placeholders in step names with the values of one example row.

    All placeholders are replaced in a single pass, values are never scanned for placeholders again.
    If two headers could match at the same position, the longest one wins.
    """
    if len(example_map) < 1:
        return list(steps)

    values = {placeholder: column[row_index] for placeholder, column in example_map.items()}
    pattern = re.compile('|'.join(re.escape(placeholder) for placeholder in sorted(values.keys(), key=len, reverse=True)))

    return [
        Step(
            pattern.sub(lambda match: values[match.group(0)], step.name),
            data_table=step.data_table,
            doc_string=step.doc_string,
        )
        for step in steps
    ]


def _expand_scenario(
    scenario: Scenario,
    feature_name: str,
    feature_tags: List[str],
    background_steps: List[Step],
    language: str,
) -> SingleScenario:
    single_scenario = SingleScenario(feature_name, scenario.name, feature_tags, background_steps, language=language)
    single_scenario.scenario_tags = convert_tags(scenario.tags)
    single_scenario.steps = convert_steps(scenario.steps)

    return single_scenario


def _expand_scenario_outline(
    outline: ScenarioOutline,
    feature_name: str,
    feature_tags: List[str],
    background_steps: List[Step],
    include_tags: Optional[Sequence[str]],
    exclude_tags: Optional[Sequence[str]],
    language: str,
) -> List[SingleScenario]:
    scenario_tags = convert_tags(outline.tags)

    if not scenario_should_be_included(scenario_tags, include_tags, exclude_tags):
        return []

    steps = convert_steps(outline.steps)

    if len(outline.examples) < 1:
        raise ParseError(f'scenario outline without examples table: {outline.name}', line=outline.line)

    # only the first examples table is used
    example_map = convert_example_table(outline.examples[0])
    columns = list(example_map.values())
    row_count = len(columns[0]) if len(columns) > 0 else 0

    outline_scenarios: List[SingleScenario] = []
    for row_index in range(row_count):
        single_scenario = SingleScenario(feature_name, outline.name, feature_tags, background_steps, language=language)
        single_scenario.steps = substitute_step_placeholders(steps, example_map, row_index)
        single_scenario.scenario_tags = list(scenario_tags)
        outline_scenarios.append(single_scenario)

    return outline_scenarios


def expand_document(
    document: Document,
    scenario_line_number: Optional[int] = None,
    include_tags: Optional[Sequence[str]] = None,
    exclude_tags: Optional[Sequence[str]] = None,
) -> List[SingleScenario]:
    feature = document.feature
    if feature is None:
        raise ParseError('could not parse feature: no feature found')

    feature_name = feature.name
    feature_tags = convert_tags(feature.tags)

    single_scenarios: List[SingleScenario] = []
    background_steps: List[Step] = []

    for definition in feature.children:
        if definition.kind == DefinitionKind.BACKGROUND:
            background_steps = convert_steps(definition.steps)
        elif definition.kind == DefinitionKind.SCENARIO:
            scenario = cast(Scenario, definition)
            if scenario_line_number is not None and scenario.line != scenario_line_number:
                continue

            single_scenario = _expand_scenario(scenario, feature_name, feature_tags, background_steps, feature.language)
            if scenario_should_be_included(single_scenario.scenario_tags, include_tags, exclude_tags):
                single_scenarios.append(single_scenario)
        elif definition.kind == DefinitionKind.SCENARIO_OUTLINE:
            outline = cast(ScenarioOutline, definition)
            if scenario_line_number is not None and outline.line != scenario_line_number:
                continue

            single_scenarios.extend(
                _expand_scenario_outline(
                    outline,
                    feature_name,
                    feature_tags,
                    background_steps,
                    include_tags,
                    exclude_tags,
                    feature.language,
                )
            )
        else:
            raise ValueError(f'unhandled definition kind {definition.kind}')

    logger.debug(f'expanded feature "{feature_name}" into {len(single_scenarios)} scenarios')

    return single_scenarios


def expand(
    feature_content: str,
    scenario_line_number: Optional[int] = None,
    include_tags: Optional[Sequence[str]] = None,
    exclude_tags: Optional[Sequence[str]] = None,
    *,
    filename: Optional[str] = None,
) -> List[SingleScenario]:
    """Expand feature text into a list of single scenarios.

    `scenario_line_number` limits the result to the scenario, or scenario outline, declared on that line.
    `include_tags` and `exclude_tags` filter scenarios on their own tags, see `scenario_should_be_included`.

    Raises `ParseError` if the text cannot be parsed, has no feature, or has a scenario outline without examples.
    """
    document = parse(feature_content, filename=filename)

    return expand_document(document, scenario_line_number, include_tags, exclude_tags)
