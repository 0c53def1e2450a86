'''
Command line interface tests
'''

import json
import sys

from rpnpad.cli import CLI

from pytest import fixture, raises


def run(*args):
    cli = CLI()
    cli.run(args=list(args))
    return cli


def test_expression(capsys):
    cli = run('-e', '3 4 +')
    assert list(cli.machine.stack) == [7.0]
    out = capsys.readouterr().out.splitlines()
    assert out[0] == 'Deg'
    assert out[-1].split() == ['1:', '7']


def test_end_of_line_commits():
    cli = run('-e', '5.2')
    assert list(cli.machine.stack) == [5.2]
    assert cli.machine.input == ''


def test_several_expressions():
    cli = run('-e', '90', 'sin', '2 *')
    assert list(cli.machine.stack) == [2.0]


@fixture
def err(capsys, monkeypatch):
    '''
    Capture what the CLI prints to the stderr it imported.
    '''
    class _CurrentStderr:
        # pytest swaps sys.stderr between setup and call, so resolve it
        # at write time rather than binding the setup-phase stream.
        def write(self, text):
            return sys.stderr.write(text)

        def flush(self):
            sys.stderr.flush()

    monkeypatch.setattr('rpnpad.cli.stderr', _CurrentStderr())
    return capsys


def test_lex_error_aborts_line(err):
    cli = run('-e', '1 2 ? +', '3')
    assert list(cli.machine.stack) == [1.0, 2.0, 3.0]
    assert "Couldn't lex ? +" in err.readouterr().err


def test_machine_error_shown(err):
    run('-e', 'Drop')
    assert 'Not enough values on the stack' in err.readouterr().err


def test_precision_and_lines(capsys):
    run('-k', '3', '-n', '2', '-e', '1 3 /')
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 3
    assert out[1].strip() == ''
    assert out[2].split() == ['1:', '0.333']


def test_state_file(tmp_path):
    state = tmp_path / 'state.json'
    run('-s', str(state), '-e', '1 2 Grad')
    assert json.loads(state.read_text()) == {
        'Stack': [1.0, 2.0],
        'Input': '',
        'ErrorMessage': '',
        'InverseMode': False,
        'AngleUnit': 'Grad',
    }
    cli = run('-s', str(state), '-e', '+')
    assert list(cli.machine.stack) == [3.0]
    assert json.loads(state.read_text())['Stack'] == [3.0]


def test_bad_state_file(tmp_path):
    state = tmp_path / 'state.json'
    state.write_text('not json')
    cli = run('-s', str(state), '-e', '4')
    assert list(cli.machine.stack) == [4.0]


def test_dump(capsys):
    run('-D', '-e', 'Swap 1')
    out = capsys.readouterr().out.splitlines()
    assert out[1].split('\t') == ['button', "'Swap'", 'STACK_OPERATOR',
                                  'StackOp.SWAP']
    assert out[2].split('\t')[0] == 'space'


def test_raw_grammar(capsys):
    run('-G', '-e')
    assert '(?<button>' in capsys.readouterr().out


def test_exclusive_modes():
    with raises(SystemExit):
        run('-D', '-G')
