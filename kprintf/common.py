#!/usr/bin/python
# -*- coding: utf-8 -*-

import os
import sys

import colorama


progname = 'kprintf'

use_color = True


def _colorize(message, color, stream):
  if use_color and color and stream.isatty():
    return color + message + colorama.Style.RESET_ALL
  return message


def dbg(message, depth=0):
  output = '[dbg] ' + ' ' * depth * 2 + message
  uniprint(_colorize(output, colorama.Fore.CYAN, sys.stderr), file=sys.stderr)


def err(message):
  output = progname + ': error: ' + message
  uniprint(_colorize(output, colorama.Fore.RED, sys.stderr), file=sys.stderr)


def uniprint(message, end=None, file=None):
  if end is None:
    end = os.linesep
  if file is None:
    file = sys.stdout

  encoding = getattr(file, 'encoding', None) or 'ascii'
  data = (message + end).encode(encoding, errors='replace')

  try:
    file.flush()
    file.buffer.write(data)
    file.buffer.flush()
  except AttributeError:
    file.write(data.decode(encoding, errors='replace'))


def unibytes(data, file=None):
  if file is None:
    file = sys.stdout

  try:
    file.flush()
    file.buffer.write(data)
    file.buffer.flush()
  except AttributeError:
    file.write(data.decode('utf-8', errors='replace'))
