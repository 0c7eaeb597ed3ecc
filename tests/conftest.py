from typing import Generator
from pathlib import Path

import pytest


FEATURE_CONTENT = '''\
@feature-tag
Feature: Shopping cart
  Background:
    Given the store is open

  @smoke
  Scenario: Add one item
    Given I have 1 items
    When I check out
    Then I pay

  @regression @Slow
  Scenario Outline: Add many items
    Given I have <count> items of <kind>
    Then the total is <total>

    Examples:
      | count | kind   | total |
      | 2     | apples | 4     |
      | 3     | pears  | 9     |

  Scenario: Untagged
    Given nothing in particular
'''

SCENARIO_LINE = 7
SCENARIO_OUTLINE_LINE = 13
UNTAGGED_SCENARIO_LINE = 22


def _feature_file(tmp_path: Path) -> Generator[Path, None, None]:
    feature_file = tmp_path / 'features' / 'shopping_cart.feature'
    feature_file.parent.mkdir(parents=True, exist_ok=True)
    feature_file.write_text(FEATURE_CONTENT, encoding='utf-8')

    yield feature_file


feature_file = pytest.fixture(scope='function')(_feature_file)
