from functools import reduce
import operator

import regex

from .util import RPNError
from .layout import DEFAULT_LAYOUT, KEYMAP


class Lexer:
    '''
    Lexer turning a typed line into key presses.

    A lexeme is a key label (``sin``, ``Swap``, ``+/-``, ``7``, ...), a
    keyboard shortcut (``^``, ``_``, ...) or whitespace, which separates
    numbers.

    For consistency, for now, needs to be instantiated, despite holding no
    internal state.
    '''
    # Everything a lexeme can press. Labels win over keyboard shortcuts.
    BUTTONS = {
        **{char: button
           for char, button
           in KEYMAP.items()
           if not char.isspace()},
        **DEFAULT_LAYOUT.by_label(),
    }

    # Leftmost-longest (POSIX) matching makes "+/-" win over "+", "sin^-1"
    # over "sin", etc. Sorting only keeps the pattern readable when dumped.
    BUTTON = r'(?:' + r'|'.join(map(regex.escape,
                                    sorted(BUTTONS, key=len, reverse=True))) + r')'
    SPACE = r'\s+'

    # All possible lexemes.
    LEXEME = r'(?<button>' + BUTTON + r')|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Stops with an RPNError on the first thing that isn't a lexeme.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise RPNError("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme presses a key.
        '''
        return 'button' in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Return the lexeme's matched groups by name.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}

    def button(self, match):
        '''
        Return the CalculatorButton a feedable lexeme presses.
        '''
        return type(self).BUTTONS[match.group('button')]

    def buttons(self, line):
        '''
        Yield the button for each lexeme in line, None for separators.
        '''
        for match in self.lex(line):
            yield self.button(match) if self.isfeedable(match) else None
