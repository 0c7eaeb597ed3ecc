from __future__ import annotations

from typing import List, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum


DataTable = Tuple[Tuple[str, ...], ...]


class ParseError(Exception):
    line: Optional[int]

    def __init__(self, message: str, *, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.line = line


class DefinitionKind(Enum):
    BACKGROUND = 'background'
    SCENARIO = 'scenario'
    SCENARIO_OUTLINE = 'scenario_outline'


@dataclass(frozen=True)
class GherkinStep:
    keyword: str
    text: str
    table: Optional[DataTable] = field(default=None)
    doc_string: Optional[str] = field(default=None)


@dataclass(frozen=True)
class Examples:
    headings: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    name: str = field(default='')


@dataclass(frozen=True)
class Background:
    steps: Tuple[GherkinStep, ...]
    name: str = field(default='')
    kind: DefinitionKind = field(default=DefinitionKind.BACKGROUND, init=False)


@dataclass(frozen=True)
class Scenario:
    name: str
    tags: Tuple[str, ...]
    steps: Tuple[GherkinStep, ...]
    line: int
    kind: DefinitionKind = field(default=DefinitionKind.SCENARIO, init=False)


@dataclass(frozen=True)
class ScenarioOutline:
    name: str
    tags: Tuple[str, ...]
    steps: Tuple[GherkinStep, ...]
    examples: Tuple[Examples, ...]
    line: int
    kind: DefinitionKind = field(default=DefinitionKind.SCENARIO_OUTLINE, init=False)


Definition = Union[Background, Scenario, ScenarioOutline]


@dataclass(frozen=True)
class Feature:
    name: str
    tags: Tuple[str, ...]
    children: Tuple[Definition, ...]
    line: int = field(default=1)
    language: str = field(default='en')


@dataclass(frozen=True)
class Document:
    feature: Optional[Feature]
    filename: Optional[str] = field(default=None)


@dataclass(frozen=True)
class Step:
    name: str
    data_table: Optional[DataTable] = field(default=None)
    doc_string: Optional[str] = field(default=None)


@dataclass
class SingleScenario:
    """A single, self contained scenario with everything it inherits from its feature resolved."""

    feature_name: str
    scenario_name: str
    feature_tags: List[str]
    background_steps: List[Step]
    scenario_tags: Optional[List[str]] = field(default=None)
    steps: Optional[List[Step]] = field(default=None)
    language: str = field(default='en')

    def __post_init__(self) -> None:
        # records must never share lists with their siblings
        self.feature_tags = list(self.feature_tags)
        self.background_steps = list(self.background_steps)
