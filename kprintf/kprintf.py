#!/usr/bin/python
# -*- coding: utf-8 -*-
# vim:ts=2:sw=2:et:ai

import functools
import locale
import sys

import chardet
import colorama
import simplejson

from . import common
from . import convert
from . import kformat

from .args import parser
from .common import dbg, err, unibytes
from .errors import FormatError
from .sink import FormatSink


def read_encoded_file(filename):
  with open(filename, 'rb') as fp:
    fbytes = fp.read()
  encoding = chardet.detect(fbytes)['encoding'] or 'utf-8'
  text = fbytes.decode(encoding, errors='replace')
  # Drop a byte order mark.
  return text[1:] if text.startswith('\ufeff') else text


def load_json_file(filename):
  return simplejson.loads(read_encoded_file(filename))


def marshal_argument(text):
  try:
    value = simplejson.loads(text)
  except simplejson.JSONDecodeError:
    return text
  return marshal_json_value(value)


def marshal_json_value(value):
  if isinstance(value, dict) and 'data' in value:
    data = value['data']
    if isinstance(data, list):
      data = tuple(data)
    if data is None or 'length' not in value:
      return data
    return (data, value['length'])
  if isinstance(value, float) and value.is_integer():
    return int(value)
  return value


def describe_op(op):
  if isinstance(op, bytes):
    return 'literal %s' % repr(op.decode('utf-8', errors='replace'))

  text = op.text.decode('utf-8', errors='replace')
  details = ["conversion '%s'" % op.conversion]
  if op.legacy:
    details = ["legacy operation '%s'" % op.conversion]
  elif op.k_flag:
    details.append('grouped' if op.integral else 'quoted')
  if op.length:
    details.append("length '%s'" % op.length)
  if op.width:
    details.append('width %d' % op.width)
  if op.left_align:
    details.append('left-aligned')
  elif op.zero_pad and op.integral:
    details.append('zero-padded')
  return "directive '%s' at %d: %s" % (text, op.start, ', '.join(details))


class DefaultConfigurable(object):
  def __init__(self, args):
    self._args = args

  @property
  def args(self):
    return self._args


class FormatCommand(DefaultConfigurable):
  def __init__(self, args):
    super(FormatCommand, self).__init__(args)
    self._resources = None

  @property
  def resources(self):
    if self._resources is None:
      loaded = {}
      if self.args.resources:
        loaded = load_json_file(self.args.resources)
        if not isinstance(loaded, dict):
          raise FormatError(
              'resources file must hold a JSON object: ' + self.args.resources)
        for k, v in loaded.items():
          if not isinstance(v, str):
            raise FormatError(
                "resources file %s: value of '%s' is not a string" % (
                    self.args.resources, k))
      self._resources = {str(k): v for k, v in loaded.items()}
    return self._resources

  def resolve_resource(self, resource_id):
    return self.resources.get(str(resource_id))

  def group_digits(self):
    if self.args.separator is None:
      return None
    return functools.partial(
        convert.group_digits, separator=self.args.separator)

  def collect(self):
    """Works out the format string and the argument list."""
    positional = list(self.args.arguments)
    fmt = self.args.format

    if self.args.format_file:
      if fmt is not None:
        positional.insert(0, fmt)
      fmt = read_encoded_file(self.args.format_file)
      if fmt.endswith('\n'):
        fmt = fmt[:-1]
    elif self.args.resource_format is not None:
      if fmt is not None:
        positional.insert(0, fmt)
      fmt = None
    elif fmt is None:
      parser.error('a format string is required')

    arguments = [marshal_argument(a) for a in positional]
    if self.args.args_file:
      loaded = load_json_file(self.args.args_file)
      if not isinstance(loaded, list):
        raise FormatError(
            'arguments file must hold a JSON array: ' + self.args.args_file)
      arguments.extend(marshal_json_value(v) for v in loaded)

    return fmt, arguments

  def explain(self, fmt):
    dbg('%s dialect, %s mode' % (
        'legacy' if self.args.legacy else 'modern',
        'compatible' if self.args.compatible else 'strict'))
    for op in kformat.parse(fmt, self.args.legacy, self.args.compatible):
      dbg(describe_op(op), 1)

  def format(self, fmt, arguments):
    if fmt is None:
      return kformat.printf_resource(
          self.args.resource_format, *arguments,
          compatible=self.args.compatible).encode('utf-8')

    if self.args.explain:
      self.explain(fmt)

    sink = kformat.format_into(
        FormatSink(), fmt, *arguments, legacy=self.args.legacy,
        compatible=self.args.compatible)
    return sink.getvalue()

  def run(self):
    try:
      fmt, arguments = self.collect()
      with kformat.fmtcontext(
          group_digits=self.group_digits(),
          resolve_resource=self.resolve_resource,
          resolve_system_error=convert.system_error_message):
        output = self.format(fmt, arguments)
    except FormatError as e:
      err(str(e))
      return 1
    except simplejson.JSONDecodeError as e:
      err('invalid JSON: %s' % e)
      return 1
    except OSError as e:
      err('cannot read %s: %s' % (e.filename, e.strerror))
      return 1

    if self.args.newline:
      output += b'\n'
    unibytes(output)
    return 0


def main(argv=None):
  args = parser.parse_args(argv)
  common.use_color = args.color
  colorama.just_fix_windows_console()

  if args.locale:
    try:
      locale.setlocale(locale.LC_NUMERIC, args.locale)
    except locale.Error:
      parser.error("unsupported locale '%s'" % args.locale)

  return FormatCommand(args).run()


if __name__ == '__main__':
  sys.exit(main())
