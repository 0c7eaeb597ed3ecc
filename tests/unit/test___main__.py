import sys
import logging

from argparse import Namespace

import pytest

from _pytest.capture import CaptureFixture
from pytest_mock import MockerFixture

from scenario_splitter.__main__ import parse_arguments, setup_logging, main


def test_parse_arguments(capsys: CaptureFixture[str]) -> None:
    sys.argv = ['scenario-splitter', 'features/']

    args = parse_arguments()

    assert args == Namespace(
        verbose=False,
        no_verbose=None,
        log_file=None,
        version=False,
        include_tags=None,
        exclude_tags=None,
        output_dir=None,
        files=['features/'],
    )

    sys.argv = [
        'scenario-splitter',
        '--verbose',
        '--no-verbose',
        'behave',
        'parse',
        '--include-tags',
        '@smoke',
        'regression',
        '--exclude-tags',
        '@wip',
        '--output-dir',
        'generated',
        '--log-file',
        'splitter.log',
        '--',
        'features/foo.feature:12',
        'features/bar.feature',
    ]

    args = parse_arguments()

    assert args == Namespace(
        verbose=True,
        no_verbose=['behave', 'parse'],
        log_file='splitter.log',
        version=False,
        include_tags=['@smoke', 'regression'],
        exclude_tags=['@wip'],
        output_dir='generated',
        files=['features/foo.feature:12', 'features/bar.feature'],
    )

    sys.argv = ['scenario-splitter', '--version']

    with pytest.raises(SystemExit) as se:
        parse_arguments()
    assert se.value.code == 0

    capture = capsys.readouterr()

    assert capture.out == ''
    assert not capture.err == ''

    sys.argv = ['scenario-splitter']

    with pytest.raises(SystemExit) as se:
        parse_arguments()
    assert se.value.code == 2

    capture = capsys.readouterr()
    assert 'at least one feature file or directory is required' in capture.err


def test_setup_logging(mocker: MockerFixture, capsys: CaptureFixture[str]) -> None:
    logging_basicConfig_mock = mocker.patch('scenario_splitter.__main__.logging.basicConfig')
    logging_FileHandler_mock = mocker.patch('scenario_splitter.__main__.logging.FileHandler', spec_set=logging.FileHandler)
    logging_StreamHandler_mock = mocker.patch('scenario_splitter.__main__.logging.StreamHandler', spec_set=logging.StreamHandler)

    # <no args>
    arguments = Namespace(verbose=False, no_verbose=None, log_file=None)

    setup_logging(arguments)

    assert logging_basicConfig_mock.call_count == 1
    _, kwargs = logging_basicConfig_mock.call_args_list[-1]
    assert kwargs.get('level', None) == logging.INFO
    assert kwargs.get('format', None) == '[%(asctime)s] %(levelname)s: %(message)s'
    handlers = kwargs.get('handlers', None)
    assert len(handlers) == 1
    assert logging_FileHandler_mock.call_count == 0
    assert logging_StreamHandler_mock.call_count == 1
    args, _ = logging_StreamHandler_mock.call_args_list[-1]
    assert args[0] is sys.stderr
    assert logging.getLogger('parse').getEffectiveLevel() == logging.ERROR
    capture = capsys.readouterr()
    assert capture.err == ''
    assert capture.out == ''

    logging_StreamHandler_mock.reset_mock()

    # --verbose --log-file splitter.log --no-verbose scenario_splitter.renderer
    logging.getLogger('scenario_splitter.renderer')
    arguments = Namespace(verbose=True, no_verbose=['scenario_splitter.renderer'], log_file='splitter.log')

    setup_logging(arguments)

    assert logging_basicConfig_mock.call_count == 2
    _, kwargs = logging_basicConfig_mock.call_args_list[-1]
    assert kwargs.get('level', None) == logging.DEBUG
    handlers = kwargs.get('handlers', None)
    assert len(handlers) == 2
    assert logging_StreamHandler_mock.call_count == 1
    assert logging_FileHandler_mock.call_count == 1
    args, _ = logging_FileHandler_mock.call_args_list[-1]
    assert args[0] == 'splitter.log'
    assert logging.getLogger('scenario_splitter.renderer').getEffectiveLevel() == logging.ERROR
    capture = capsys.readouterr()
    assert capture.err == ''
    assert capture.out == ''

    # unknown logger
    arguments = Namespace(verbose=False, no_verbose=['does-not-exist'], log_file=None)

    setup_logging(arguments)

    capture = capsys.readouterr()
    assert capture.err == '!! logger "does-not-exist" does not exist\n'
    assert capture.out == ''


def test_main(mocker: MockerFixture) -> None:
    mocker.patch('scenario_splitter.__main__.setup_logging', return_value=None)  # no logging in test
    cli_mock = mocker.patch('scenario_splitter.__main__.cli', return_value=0)

    sys.argv = ['scenario-splitter', 'features/']

    with pytest.raises(SystemExit) as se:
        main()
    assert se.value.code == 0

    assert cli_mock.call_count == 1
    args, _ = cli_mock.call_args_list[-1]
    assert args[0].files == ['features/']

    cli_mock.return_value = 1

    with pytest.raises(SystemExit) as se:
        main()
    assert se.value.code == 1
