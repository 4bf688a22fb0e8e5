#!/usr/bin/python
# -*- coding: utf-8 -*-

import argparse

from .common import progname

desc = '''
Formats its arguments through an extended printf-style format string and
writes the result to standard output.
'''

epilog = '''
Each ARG is read as a JSON literal: 42 is an integer, "42" a string, null a
missing pointer, [104, 105] a list of UTF-16 code units and
{"data": "abc", "length": 2} a string view. Anything that is not valid JSON is
passed through as a plain string.
'''


def RequireOtherArgument(other_argument, errmsg=None):
  class RequireOtherArgument_Action(argparse.Action):
    arg = other_argument
    err = errmsg

    def __call__(self, parser, args, values, option_string=None):
      if not getattr(args, self.arg):
        if self.err:
          parser.error(self.err)
        else:
          if option_string:
            parser.error(option_string + ' requires other option --' + self.arg)
          else:
            parser.error('positional option requires other option --' + self.arg)
      else:
        setattr(args, self.dest, values)

  return RequireOtherArgument_Action


parser = argparse.ArgumentParser(prog=progname, description=desc, epilog=epilog)

source_group = parser.add_mutually_exclusive_group()

source_group.add_argument('--format-file',
    dest='format_file',
    default=None,
    help='read the format string from a file instead of the command line',
    metavar='FILE',
)

parser.add_argument('--args-file',
    dest='args_file',
    default=None,
    help='read the arguments from a file holding a JSON array',
    metavar='FILE',
)

parser.add_argument('--resources',
    default=None,
    help='JSON object mapping string ids to strings, used by %%kr',
    metavar='FILE',
)

source_group.add_argument('--resource-format',
    dest='resource_format',
    action=RequireOtherArgument('resources'),
    type=int,
    help='take the format string from the resources under this id '
        '(must follow --resources)',
    metavar='ID',
)

parser.add_argument('--legacy',
    action='store_true',
    dest='legacy',
    help='use the legacy printf dialect, where %%ks and %%kls are plurals',
)
parser.set_defaults(legacy=False)

parser.add_argument('--strict',
    action='store_false',
    dest='compatible',
    help='fail on a malformed directive instead of printing it verbatim',
)
parser.set_defaults(compatible=True)

parser.add_argument('--separator',
    default=None,
    help='digit grouping separator for the k flag (default: from the locale)',
    metavar='SEP',
)

parser.add_argument('--locale',
    default=None,
    help='numeric locale to take the digit grouping separator from',
    metavar='NAME',
)

parser.add_argument('--newline',
    action='store_true',
    dest='newline',
    help='print a newline after the formatted output',
)
parser.set_defaults(newline=False)

parser.add_argument('--explain',
    action='store_true',
    dest='explain',
    help='verbosely explain how the format string was parsed',
)
parser.set_defaults(explain=False)

parser.add_argument('--no-color',
    action='store_false',
    dest='color',
    help="don't color diagnostics even when writing to a terminal",
)
parser.set_defaults(color=True)

parser.add_argument('format',
    nargs='?',
    default=None,
    help='the format string',
    metavar='FORMAT',
)

parser.add_argument('arguments',
    nargs='*',
    default=[],
    help='arguments consumed by the directives, left to right',
    metavar='ARG',
)
