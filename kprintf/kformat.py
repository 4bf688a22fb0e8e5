#!/usr/bin/python
# -*- coding: utf-8 -*-
# vim:ts=2:sw=2:et:ai

from typing import Callable

import contextvars
import re

from . import convert
from .argreader import ArgumentReader
from .common import err
from .errors import FormatError, malformed_error, text_error
from .sink import FormatSink


# Largest field width we allow; wider requests are clamped silently.
max_field_width = 20

missing_string = b'(missing argument for %s)'
null_wide_string = b'(null)'

integral_conversions = frozenset('diuoxX')


class Directive(object):
  """One parsed %-directive.

  A directive whose `conversion` is None is malformed; `end` then points just
  past the character that could not be understood.
  """
  __slots__ = (
      'start', 'end', 'text', 'conversion', 'k_flag', 'length', 'left_align',
      'zero_pad', 'width')

  def __init__(self, start):
    self.start = start
    self.end = start
    self.text = b''
    self.conversion = None
    self.k_flag = False
    self.length = None
    self.left_align = False
    self.zero_pad = False
    self.width = 0

  def finish(self, fmt, end, conversion):
    self.end = end
    self.text = fmt[self.start:end]
    self.conversion = conversion
    return self

  @property
  def legacy(self):
    return self.conversion is not None and len(self.conversion) > 1

  @property
  def integral(self):
    return self.conversion in integral_conversions

  def __repr__(self):
    return 'directive(%s)' % repr(self.text)


_ctx_group_digits = contextvars.ContextVar('group_digits', default=None)
_ctx_utf16_to_utf8 = contextvars.ContextVar('utf16_to_utf8', default=None)
_ctx_resolve_resource = contextvars.ContextVar('resolve_resource', default=None)
_ctx_resolve_system_error = contextvars.ContextVar(
    'resolve_system_error', default=None)


class _FormatContextManager(object):
  __slots__ = 'settings', 'tokens'

  def __init__(self, settings):
    self.settings = settings
    self.tokens = []

  def __enter__(self):
    for var, value in self.settings:
      if value is not None:
        self.tokens.append((var, var.set(value)))
    return self

  def __exit__(self, exc_type, exc_val, exc_tb):
    while self.tokens:
      var, token = self.tokens.pop()
      var.reset(token)


def fmtcontext(group_digits=None, utf16_to_utf8=None, resolve_resource=None,
    resolve_system_error=None):
  """Installs host callbacks for every format run inside the with-block.

  Callbacks left as None keep whatever an enclosing block installed.
  """
  return _FormatContextManager((
      (_ctx_group_digits, group_digits),
      (_ctx_utf16_to_utf8, utf16_to_utf8),
      (_ctx_resolve_resource, resolve_resource),
      (_ctx_resolve_system_error, resolve_system_error),
  ))


_bytes_types = (bytes, bytearray, memoryview)


def _as_bytes(value, what):
  if isinstance(value, str):
    return value.encode('utf-8', errors='replace')
  if isinstance(value, _bytes_types):
    return bytes(value)
  raise FormatError(text_error(what, value))


def _group(number: str, sign_present: bool) -> str:
  group_digits = _ctx_group_digits.get() or convert.group_digits
  return group_digits(number, sign_present)


def _transcode(units) -> bytes:
  utf16_to_utf8 = _ctx_utf16_to_utf8.get() or convert.utf16_to_utf8
  return _as_bytes(utf16_to_utf8(units), 'transcoded text')


def _lookup(var, key, what) -> bytes:
  callback = var.get()
  if callback is None:
    return b''
  value = callback(key)
  if value is None:
    return b''
  return _as_bytes(value, '%s %s' % (what, key))


def render_integer(value: int, base=10, grouped=False, upper=False) -> bytes:
  number = convert.render_digits(value, base, upper)
  if grouped and base == 10:
    number = _group(number, value < 0)
  return number.encode('utf-8')


def _plural(n: int) -> bytes:
  return b's' if convert.is_plural(n) else b''


def convert_signed(d, reader):
  value = reader.next_numeric(d, d.length, signed=True)
  return render_integer(value, 10, d.k_flag)


_unsigned_bases = {
    'u': (10, False),
    'o': (8, False),
    'x': (16, False),
    'X': (16, True),
}


def convert_unsigned(d, reader):
  base, upper = _unsigned_bases[d.conversion]
  value = reader.next_numeric(d, d.length, signed=False)
  return render_integer(value, base, d.k_flag, upper)


def _emit_char(data, d):
  return convert.quote(data) if d.k_flag else data


def convert_char(d, reader):
  if d.length == 'l':
    return _emit_char(_transcode(reader.next_wide_char(d)), d)
  return _emit_char(reader.next_char(d), d)


def convert_wide_char(d, reader):
  return _emit_char(_transcode(reader.next_wide_char(d)), d)


def _emit_string(data, d, missing):
  if data is None:
    data = missing
  return convert.quote(data) if d.k_flag else data


def _emit_wide(units, d):
  if units is None:
    return _emit_string(None, d, null_wide_string)
  return _emit_string(_transcode(units), d, None)


def convert_string(d, reader):
  if d.length == 'l':
    return _emit_wide(reader.next_wide(d), d)
  return _emit_string(reader.next_string(d), d, missing_string)


def convert_wide_string(d, reader):
  return _emit_wide(reader.next_wide(d), d)


def convert_view(d, reader):
  if d.length == 'l':
    return _emit_wide(reader.next_wide(d, terminated=False), d)
  return _emit_string(
      reader.next_string(d, terminated=False), d, missing_string)


def legacy_grouped(length, signed):
  def convert_grouped(d, reader):
    return render_integer(reader.next_numeric(d, length, signed), 10, True)
  return convert_grouped


def legacy_plural(length):
  def convert_plural(d, reader):
    return _plural(reader.next_numeric(d, length, signed=True))
  return convert_plural


def legacy_last_plural(d, reader):
  return _plural(reader.last_numeric)


def legacy_quoted(d, reader):
  data = reader.next_string(d)
  return convert.quote(missing_string if data is None else data)


def legacy_resource(d, reader):
  return _lookup(_ctx_resolve_resource, reader.next_int(d), 'resource')


def legacy_system_error(d, reader):
  return _lookup(
      _ctx_resolve_system_error, reader.next_int(d), 'system error')


_directive_vtable = {
    'c': convert_char,
    'C': convert_wide_char,
    's': convert_string,
    'S': convert_wide_string,
    'v': convert_view,
    'd': convert_signed,
    'i': convert_signed,
    'u': convert_unsigned,
    'o': convert_unsigned,
    'x': convert_unsigned,
    'X': convert_unsigned,
    'kd': legacy_grouped(None, True),
    'ku': legacy_grouped(None, False),
    'kt': legacy_grouped('z', False),
    'kI64d': legacy_grouped('I64', True),
    'kI64u': legacy_grouped('I64', False),
    'ks': legacy_plural(None),
    'kS': legacy_plural('ll'),
    'kls': legacy_last_plural,
    'kq': legacy_quoted,
    'kr': legacy_resource,
    'ke': legacy_system_error,
}

# Spellings after "%k", longest first. 'n' is a deprecated alias of 'd'.
_legacy_k_directives = (
    (b'I64d', 'kI64d'),
    (b'I64u', 'kI64u'),
    (b'ls', 'kls'),
    (b'd', 'kd'),
    (b'n', 'kd'),
    (b'u', 'ku'),
    (b't', 'kt'),
    (b's', 'ks'),
    (b'S', 'kS'),
    (b'q', 'kq'),
    (b'r', 'kr'),
    (b'e', 'ke'),
)

# Where k is a flag, only the letters that mean nothing else stay legacy.
_modern_k_directives = (
    (b'n', 'kd'),
    (b'q', 'kq'),
    (b'r', 'kr'),
    (b'e', 'ke'),
)

_length_modifiers = tuple((m, m.decode('ascii')) for m in (
    b'hh', b'h', b'll', b'l', b'j', b'z', b't', b'L', b'I64', b'I'))

_ascii_digits = b'0123456789'

next_directive = re.compile(rb'%')


def match_spelling(fmt, i, spellings):
  for spelling, value in spellings:
    if fmt.startswith(spelling, i):
      return i + len(spelling), value
  return i, None


def parse_length(fmt, i):
  return match_spelling(fmt, i, _length_modifiers)


def parse_flags(fmt, i, d):
  while True:
    c = chr(fmt[i])
    if c == '-':
      d.left_align = True
    elif c == '0':
      d.zero_pad = True
    else:
      return i
    i += 1


def parse_width(fmt, i, d):
  start = i
  while fmt[i] in _ascii_digits:
    i += 1
  if i > start:
    d.width = min(int(fmt[start:i]), max_field_width)
  return i


def parse_directive(fmt, start, legacy=False):
  """Parses the directive whose '%' is at `start`.

  Raises IndexError when the format ends inside the directive.
  """
  d = Directive(start)
  i = start + 1
  c = chr(fmt[i])

  if c == '%':
    return d.finish(fmt, i + 1, '%')

  if c == 'k':
    i += 1
    d.k_flag = True
    end, op = match_spelling(
        fmt, i, _legacy_k_directives if legacy else _modern_k_directives)
    if op:
      return d.finish(fmt, end, op)

  i, d.length = parse_length(fmt, i)
  i = parse_flags(fmt, i, d)
  i = parse_width(fmt, i, d)
  if d.length is None:
    i, d.length = parse_length(fmt, i)

  c = chr(fmt[i])
  if c in _directive_vtable:
    return d.finish(fmt, i + 1, c)
  return d.finish(fmt, i + 1, None)


def _add_literal(ops, data):
  if ops and isinstance(ops[-1], bytes):
    ops[-1] += data
  else:
    ops.append(data)


def _as_format(fmt) -> bytes:
  if isinstance(fmt, str):
    return fmt.encode('utf-8')
  if isinstance(fmt, _bytes_types):
    return bytes(fmt)
  raise FormatError(text_error('format', fmt))


default_ccache = {}

# Parsed formats kept per cache; the oldest entry goes first.
max_cached_formats = 1024


def parse(fmt, legacy=False, compatible=True, ccache=default_ccache):
  """Splits a format into literal byte runs and Directive descriptors.

  A malformed directive ends the parse: with `compatible` set, the rest of the
  format (from its '%') becomes the final literal; otherwise FormatError.
  """
  fmt = _as_format(fmt)
  key = (fmt, legacy, compatible)
  if key in ccache:
    return ccache[key]

  ops = []
  i = 0
  while i < len(fmt):
    match = next_directive.search(fmt, i)
    if not match:
      _add_literal(ops, fmt[i:])
      break

    start = match.start()
    if start > i:
      _add_literal(ops, fmt[i:start])

    try:
      d = parse_directive(fmt, start, legacy)
      truncated = False
    except IndexError:
      d, truncated = None, True

    if d is None or d.conversion is None:
      if not compatible:
        end = len(fmt) if d is None else d.end
        raise FormatError(malformed_error(fmt[start:end], start, truncated))
      _add_literal(ops, fmt[start:])
      break

    if d.conversion == '%':
      _add_literal(ops, b'%')
    else:
      ops.append(d)
    i = d.end

  ops = tuple(ops)
  if len(ccache) >= max_cached_formats:
    del ccache[next(iter(ccache))]
  ccache[key] = ops
  return ops


def execute(ops, args, sink):
  reader = ArgumentReader(args)
  for op in ops:
    if isinstance(op, bytes):
      sink.append(op)
      continue

    rendered = _directive_vtable[op.conversion](op, reader)
    if op.width:
      rendered = convert.pad(
          rendered, op.width, op.left_align, op.zero_pad, op.integral)
    sink.append(rendered)
  return sink


def format_into(sink, fmt, *args, legacy=False, compatible=True):
  return execute(parse(fmt, legacy, compatible), args, sink)


def format(fmt, *args, compatible=True) -> str:
  return str(format_into(FormatSink(), fmt, *args, compatible=compatible))


def printf(fmt, *args, compatible=True) -> str:
  return str(format_into(
      FormatSink(), fmt, *args, legacy=True, compatible=compatible))


def printf_append(sink, fmt, *args, compatible=True):
  return format_into(sink, fmt, *args, legacy=True, compatible=compatible)


def printf_resource(resource_id, *args, compatible=True) -> str:
  resolve_resource = _ctx_resolve_resource.get()
  fmt = resolve_resource(resource_id) if resolve_resource else None
  if not fmt:
    err('invalid string id: %s' % resource_id)
    return ''
  return printf(fmt, *args, compatible=compatible)


def compile(fmt, legacy=False, compatible=True) -> Callable[..., str]:
  ops = parse(fmt, legacy, compatible)
  return lambda *args: str(execute(ops, args, FormatSink()))
