from importlib.metadata import version, PackageNotFoundError

from scenario_splitter.model import ParseError, SingleScenario, Step
from scenario_splitter.expander import expand, expand_document, scenario_should_be_included


try:
    __version__ = version('scenario-splitter')
except PackageNotFoundError:
    __version__ = 'unknown'


__all__ = [
    'ParseError',
    'SingleScenario',
    'Step',
    'expand',
    'expand_document',
    'scenario_should_be_included',
]
