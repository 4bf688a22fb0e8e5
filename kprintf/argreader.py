#!/usr/bin/python
# -*- coding: utf-8 -*-
# vim:ts=2:sw=2:et:ai

import operator

from .convert import (SIZE_T_SENTINEL, length_bits, to_signed, to_unsigned,
                      utf16_units)
from .errors import FormatArgumentError, argument_error


_bytes_types = (bytes, bytearray, memoryview)


class ArgumentReader(object):
  """Hands out the format arguments left to right, one per directive.

  `last_numeric` shadows the most recent integral argument for the plural
  directives; it starts out as zero.
  """
  __slots__ = 'args', 'index', 'last_numeric'

  def __init__(self, args):
    self.args = args
    self.index = 0
    self.last_numeric = 0

  def _next(self, directive):
    try:
      value = self.args[self.index]
    except IndexError:
      raise FormatArgumentError(
          argument_error(directive, None, exhausted=True)) from None
    self.index += 1
    return value

  def next_int(self, directive) -> int:
    value = self._next(directive)
    if isinstance(value, (str, bytes, bytearray, float)):
      raise FormatArgumentError(argument_error(directive, 'an integer', value))
    try:
      return operator.index(value)
    except TypeError as e:
      raise FormatArgumentError(
          argument_error(directive, 'an integer', value)) from e

  def next_numeric(self, directive, length, signed=True) -> int:
    """Reads an integer at the width `length` selects and remembers it."""
    bits = length_bits[length]
    value = self.next_int(directive)
    if length in ('z', 'I') or (length == 't' and not signed):
      value = to_unsigned(value, bits)
      if value == SIZE_T_SENTINEL:
        value = -1
    elif signed:
      value = to_signed(value, bits)
    else:
      value = to_unsigned(value, bits)
    self.last_numeric = value
    return value

  def next_char(self, directive) -> bytes:
    value = self._next(directive)
    if isinstance(value, str) and len(value) == 1:
      return value.encode('utf-8', errors='replace')
    if isinstance(value, _bytes_types) and len(value) == 1:
      return bytes(value)
    try:
      return bytes((operator.index(value) & 0xFF,))
    except TypeError as e:
      raise FormatArgumentError(
          argument_error(directive, 'a character', value)) from e

  def next_wide_char(self, directive) -> tuple:
    value = self._next(directive)
    if isinstance(value, str) and len(value) == 1:
      return utf16_units(value)
    if isinstance(value, (str, bytes, bytearray)):
      raise FormatArgumentError(
          argument_error(directive, 'a UTF-16 code unit', value))
    try:
      return (operator.index(value) & 0xFFFF,)
    except TypeError as e:
      raise FormatArgumentError(
          argument_error(directive, 'a UTF-16 code unit', value)) from e

  def next_string(self, directive, terminated=True):
    """Reads a narrow string as bytes, or None for a missing one.

    A terminated string stops at its first NUL; a view may also be given as a
    (data, length) pair.
    """
    value = self._next(directive)
    if value is None:
      return None

    length = None
    if not terminated and isinstance(value, tuple) and len(value) == 2:
      value, length = value
      length = self._view_length(directive, length, value)

    if isinstance(value, str):
      data = value.encode('utf-8', errors='replace')
    elif isinstance(value, _bytes_types):
      data = bytes(value)
    else:
      raise FormatArgumentError(argument_error(directive, 'a string', value))

    if length is not None:
      return data[:length]
    if terminated:
      nul = data.find(b'\0')
      if nul >= 0:
        return data[:nul]
    return data

  def next_wide(self, directive, terminated=True):
    """Reads a wide string as a tuple of UTF-16 code units, or None."""
    value = self._next(directive)
    if value is None:
      return None

    length = None
    if not terminated and isinstance(value, tuple) and len(value) == 2 and (
        not isinstance(value[0], int)):
      value, length = value
      length = self._view_length(directive, length, value)

    if isinstance(value, str):
      units = utf16_units(value)
    elif isinstance(value, (bytes, bytearray)):
      raise FormatArgumentError(
          argument_error(directive, 'a wide string', value))
    else:
      try:
        units = tuple(operator.index(u) & 0xFFFF for u in value)
      except TypeError as e:
        raise FormatArgumentError(
            argument_error(directive, 'a wide string', value)) from e

    if length is not None:
      return units[:length]
    if terminated and 0 in units:
      return units[:units.index(0)]
    return units

  def _view_length(self, directive, length, value):
    try:
      length = operator.index(length)
    except TypeError as e:
      raise FormatArgumentError(
          argument_error(directive, 'a (data, length) view', value)) from e
    if length < 0:
      raise FormatArgumentError(
          argument_error(directive, 'a non-negative view length', length))
    return length
