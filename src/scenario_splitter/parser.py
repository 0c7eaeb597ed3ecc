from __future__ import annotations

import logging

from typing import List, Optional, Tuple, Union
from dataclasses import replace

from behave.i18n import languages
from behave.parser import parse_feature, ParserError
from behave import model as behave_model

from scenario_splitter.model import (
    Background,
    DataTable,
    Definition,
    Document,
    Examples,
    Feature,
    GherkinStep,
    ParseError,
    Scenario,
    ScenarioOutline,
)


logger = logging.getLogger(__name__)

MARKER_LANGUAGE = '# language:'


def _convert_tags(tags: List[behave_model.Tag]) -> Tuple[str, ...]:
    return tuple(str(tag) for tag in tags)


def _convert_table(table: Optional[behave_model.Table]) -> Optional[DataTable]:
    if table is None:
        return None

    rows: List[Tuple[str, ...]] = [tuple(table.headings)]
    rows.extend(tuple(row.cells) for row in table.rows)

    return tuple(rows)


def _convert_steps(steps: List[behave_model.Step]) -> Tuple[GherkinStep, ...]:
    return tuple(
        GherkinStep(
            keyword=step.keyword,
            text=step.name,
            table=_convert_table(step.table),
            doc_string=step.text,
        )
        for step in steps
    )


def _convert_examples(examples: behave_model.Examples) -> Examples:
    table = examples.table
    if table is None:
        return Examples(headings=(), rows=(), name=examples.name)

    return Examples(
        headings=tuple(table.headings),
        rows=tuple(tuple(row.cells) for row in table.rows),
        name=examples.name,
    )


def _convert_scenario(scenario: behave_model.Scenario) -> Union[Scenario, ScenarioOutline]:
    # ScenarioOutline is a subclass of Scenario in behave, so it has to be checked first
    if isinstance(scenario, behave_model.ScenarioOutline):
        return ScenarioOutline(
            name=scenario.name,
            tags=_convert_tags(scenario.tags),
            steps=_convert_steps(scenario.steps),
            examples=tuple(_convert_examples(examples) for examples in scenario.examples),
            line=scenario.line,
        )

    return Scenario(
        name=scenario.name,
        tags=_convert_tags(scenario.tags),
        steps=_convert_steps(scenario.steps),
        line=scenario.line,
    )


def _convert_rule(rule: behave_model.Rule, feature_background_steps: Tuple[GherkinStep, ...]) -> List[Definition]:
    # scenarios in a rule run after the feature background and the rule background, and inherit the rule tags
    background_steps = feature_background_steps
    background_name = ''
    if rule.background is not None:
        background_steps = feature_background_steps + _convert_steps(rule.background.steps)
        background_name = rule.background.name

    rule_tags = _convert_tags(rule.tags)

    children: List[Definition] = [Background(steps=background_steps, name=background_name)]
    for scenario in rule.scenarios:
        definition = _convert_scenario(scenario)
        if len(rule_tags) > 0:
            definition = replace(definition, tags=rule_tags + definition.tags)

        children.append(definition)

    return children


def _convert_feature(feature: behave_model.Feature, language: str) -> Feature:
    children: List[Definition] = []
    background_steps: Tuple[GherkinStep, ...] = ()

    if feature.background is not None:
        background_steps = _convert_steps(feature.background.steps)
        children.append(Background(steps=background_steps, name=feature.background.name))

    children.extend(_convert_scenario(scenario) for scenario in feature.scenarios)

    for rule in feature.rules:
        children.extend(_convert_rule(rule, background_steps))

    return Feature(
        name=feature.name,
        tags=_convert_tags(feature.tags),
        children=tuple(children),
        line=feature.line,
        language=language,
    )


def find_language(content: str) -> str:
    """Get the language declared with `# language: <code>`, defaults to `en`."""
    language: str = 'en'

    for line in content.splitlines():
        line = line.strip()
        if len(line) < 1:
            continue

        # the marker is only valid before anything else in the file
        if not line.startswith('#'):
            break

        if line.startswith(MARKER_LANGUAGE):
            lang = line[len(MARKER_LANGUAGE):].strip()
            if len(lang) >= 2:
                language = lang
            break

    return language


def parse(content: str, *, filename: Optional[str] = None) -> Document:
    """Parse feature text into a `Document`.

    Raises `ParseError` if the text is not valid gherkin, if it does not contain a feature, or if it
    declares a language behave does not know.
    """
    language = find_language(content)
    if language not in languages:
        raise ParseError(f'could not parse feature: unknown language "{language}"', line=1)

    try:
        feature = parse_feature(content, language=language, filename=filename)
    except ParserError as e:
        logger.debug(f'behave failed to parse {filename or "<string>"}: {e}')
        raise ParseError(f'could not parse feature: {e}', line=e.line) from e

    if feature is None:
        raise ParseError('could not parse feature: no feature found')

    return Document(feature=_convert_feature(feature, language), filename=filename)
