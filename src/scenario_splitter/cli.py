from __future__ import annotations

import sys
import logging

from typing import List, NamedTuple, Optional, Set, Tuple
from argparse import Namespace as Arguments
from pathlib import Path

from colorama import init, Fore

from scenario_splitter.converter import normalize_tag
from scenario_splitter.expander import expand
from scenario_splitter.model import ParseError, SingleScenario
from scenario_splitter.renderer import render_scenario, scenario_file_name


logger = logging.getLogger(__name__)


class FeatureTarget(NamedTuple):
    path: Path
    line_numbers: List[Optional[int]]
    # directory, relative to the argument it was found in, to write generated files in
    relative_dir: Path


def parse_feature_argument(value: str) -> Tuple[Path, List[Optional[int]]]:
    """Split `path/to/file.feature:10:20` into the path and the requested scenario line numbers."""
    line_numbers: List[Optional[int]] = []
    path = value

    while ':' in path:
        head, tail = path.rsplit(':', 1)
        if not tail.isdigit():
            break

        line_numbers.insert(0, int(tail))
        path = head

    if len(line_numbers) < 1:
        line_numbers = [None]

    return Path(path), line_numbers


def collect_feature_targets(values: List[str]) -> List[FeatureTarget]:
    targets: List[FeatureTarget] = []

    for value in values:
        path, line_numbers = parse_feature_argument(value)

        if path.is_dir():
            targets.extend(FeatureTarget(file, [None], file.parent.relative_to(path)) for file in sorted(path.rglob('*.feature')))
        else:
            targets.append(FeatureTarget(path, line_numbers, Path('.')))

    return targets


def error_to_text(filename: str, message: str) -> str:
    message = ': '.join(message.split('\n'))

    return '\t'.join(
        [
            filename,
            f'{Fore.RED}error{Fore.RESET}',
            message,
        ]
    )


def _expand_target(file: Path, line_numbers: List[Optional[int]], args: Arguments) -> List[SingleScenario]:
    include_tags = [normalize_tag(tag) for tag in args.include_tags or []]
    exclude_tags = [normalize_tag(tag) for tag in args.exclude_tags or []]

    content = file.read_text(encoding='utf-8')

    single_scenarios: List[SingleScenario] = []
    for line_number in line_numbers:
        single_scenarios.extend(expand(content, line_number, include_tags, exclude_tags, filename=file.as_posix()))

    return single_scenarios


def get_output_files(target: FeatureTarget, count: int, output_dir: Path) -> List[Path]:
    """Get the files to write the scenarios of a target to, the layout below its argument is kept."""
    return [output_dir / target.relative_dir / scenario_file_name(target.path, index) for index in range(1, count + 1)]


def _write_scenarios(single_scenarios: List[SingleScenario], output_files: Optional[List[Path]]) -> None:
    if output_files is None:
        for single_scenario in single_scenarios:
            print(render_scenario(single_scenario))

        return

    for single_scenario, output_file in zip(single_scenarios, output_files):
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(render_scenario(single_scenario), encoding='utf-8')
        logger.debug(f'wrote {output_file.as_posix()}')


def cli(args: Arguments) -> int:
    # init colorama for ansi colors
    init()

    output_dir: Optional[Path] = Path(args.output_dir) if args.output_dir is not None else None

    rc: int = 0
    total: int = 0
    written: Set[Path] = set()
    for target in collect_feature_targets(args.files):
        filename = target.path.as_posix()

        try:
            single_scenarios = _expand_target(target.path, target.line_numbers, args)
        except ParseError as e:
            logger.debug(f'failed to expand {filename}', exc_info=True)
            print(error_to_text(filename, str(e)), file=sys.stderr)
            rc = 1
            continue
        except OSError as e:
            print(error_to_text(filename, f'unable to read file: {e.strerror or e}'), file=sys.stderr)
            rc = 1
            continue

        output_files: Optional[List[Path]] = None
        if output_dir is not None:
            output_files = get_output_files(target, len(single_scenarios), output_dir)
            collisions = [output_file.as_posix() for output_file in output_files if output_file in written]
            if len(collisions) > 0:
                print(error_to_text(filename, f'output file already generated from another feature: {", ".join(collisions)}'), file=sys.stderr)
                rc = 1
                continue

            written.update(output_files)

        _write_scenarios(single_scenarios, output_files)
        total += len(single_scenarios)

    logger.info(f'generated {total} scenarios')

    return rc
