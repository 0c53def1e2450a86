from os import isatty, path
from sys import stdin, stdout, stderr, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession

from .util import RPNError, configure_logging
from .layout import LayoutDefinition
from .machine import CalculatorEngine
from .lexer import Lexer


logger = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt, toolbar=None):
        self.prompt = prompt
        self.toolbar = toolbar

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=None,
                                    # Angle unit and inverse mode, like the
                                    # indicators on top of the LCD.
                                    bottom_toolbar=self.toolbar,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the RPN keypad.

    Each line is typed into the calculator key by key. Key labels (``sin``,
    ``Swap``, ``+/-``, ``Inv``, ...) press that key; whitespace and the end of
    a line push the number being typed.
    '''

    DEFAULT_PROMPT = '> '

    def dumper(self):
        '''
        Dump all lexemes and the key each presses.
        '''
        lexer = Lexer()
        print('[groups]\t<repr(lexeme)>\t<type>\t<op>')
        for line in self.args.expressions:
            for match in lexer.lex(line):
                matched = match.group(0)  # the lexeme text itself
                groups = lexer.matchedgroups(match)
                if lexer.isfeedable(match):
                    button = lexer.button(match)
                    type_, op = button.type.name, button.op
                else:
                    type_, op = None, None
                print(*groups.keys(),
                      repr(matched),
                      type_,
                      op,
                      sep='\t')

    def executor(self):
        '''
        Run machine (RPN calculator).
        '''
        machine = self.machine
        lexer = Lexer()
        for line in self.args.expressions:
            try:
                for button in lexer.buttons(line):
                    if button is None:
                        self._separate()
                    else:
                        machine.dispatch(button)
                self._separate()
            # Abort entire rest of line, makes sense anyway
            except RPNError as e:
                print(e.args[0], file=stderr)
            self.show()

    def _separate(self):
        '''
        Push the number being typed, unless the last key failed.
        '''
        # Committing would clear the error before it is shown.
        if self.machine.input and not self.machine.error_message:
            self.machine.commit()

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def show(self):
        '''
        Print the display: indicators, stack, input and error.
        '''
        machine = self.machine
        width = machine.layout.decimals + 8
        print(machine.status())
        for label, text in machine.display_lines():
            print('{:>3} {:>{width}}'.format(label, text, width=width))
        if machine.input:
            print(machine.input)
        if machine.error_message:
            print(machine.error_message, file=stderr)

    def toolbar(self):
        return self.machine.status()

    def load(self):
        '''
        Restore the calculator from the state file, if there is one.
        '''
        if not self.args.state or not path.exists(self.args.state):
            return
        with open(self.args.state) as fp:
            text = fp.read()
        try:
            self.machine.from_json(text)
        except RPNError as e:
            logger.warning('Ignoring state in %s: %s', self.args.state,
                           e.args[0])
        else:
            logger.info('Loaded state from %s', self.args.state)

    def save(self):
        if not self.args.state:
            return
        with open(self.args.state, 'w') as fp:
            fp.write(self.machine.to_json())
        logger.info('Saved state to %s', self.args.state)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    toolbar=self.toolbar)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('-k', '--precision',
                                          type=int,
                                          default=LayoutDefinition.DECIMALS,
                                          help='significant digits shown')
        self.argument_parser.add_argument('-n', '--lines',
                                          type=int,
                                          default=LayoutDefinition.DISPLAYED_STACK_SIZE,
                                          help='stack entries shown')
        self.argument_parser.add_argument('-s', '--state',
                                          metavar='FILE',
                                          help='load state from, and save '
                                               'it to, FILE')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        configure_logging(self.args.verbose)
        layout = LayoutDefinition(displayed_stack_size=self.args.lines,
                                  decimals=self.args.precision)
        self.machine = CalculatorEngine(layout=layout)
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        self.load()
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)
        finally:
            if self.args.action == self.executor:
                self.save()
