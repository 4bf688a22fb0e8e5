#!/usr/bin/python
# -*- coding: utf-8 -*-
# vim:ts=2:sw=2:et:ai

from typing import Sequence

import codecs
import locale
import os
import platform
import struct
import sys


SIZE_BITS = sys.maxsize.bit_length() + 1

# LLP64 keeps long at 32 bits even in 64-bit builds.
LONG_BITS = 32 if platform.system() == 'Windows' else SIZE_BITS

SIZE_T_SENTINEL = (1 << SIZE_BITS) - 1

length_bits = {
    None: 32,
    'hh': 8,
    'h': 16,
    'l': LONG_BITS,
    'll': 64,
    'L': 64,
    'j': 64,
    'z': SIZE_BITS,
    't': SIZE_BITS,
    'I64': 64,
    'I': SIZE_BITS,
}

_digits_lower = '0123456789abcdef'
_digits_upper = '0123456789ABCDEF'


def to_unsigned(value: int, bits: int) -> int:
  return value & ((1 << bits) - 1)


def to_signed(value: int, bits: int) -> int:
  value = to_unsigned(value, bits)
  if value >> (bits - 1):
    value -= 1 << bits
  return value


def render_digits(value: int, base=10, upper=False) -> str:
  """Renders an integer in base 8, 10 or 16 by repeated division.

  Negative values get a leading '-'; everything else is digits only.
  """
  table = _digits_upper if upper else _digits_lower
  negative = value < 0
  if negative:
    value = -value

  digits = []
  while True:
    value, remainder = divmod(value, base)
    digits.append(table[remainder])
    if not value:
      break

  if negative:
    digits.append('-')
  digits.reverse()
  return ''.join(digits)


def thousands_separator() -> str:
  # The C locale has no separator at all, so fall back to a comma.
  return locale.localeconv().get('thousands_sep') or ','


def group_digits(number: str, sign_present: bool, separator=None) -> str:
  """Inserts a separator every three digits counting from the right."""
  if separator is None:
    separator = thousands_separator()

  sign, digits = (number[:1], number[1:]) if sign_present else ('', number)

  start = len(digits) % 3 or 3
  groups = [digits[:start]]
  for i in range(start, len(digits), 3):
    groups.append(digits[i:i+3])

  return sign + separator.join(groups)


def pad(rendered: bytes, width: int, left_align=False, zero_pad=False,
    integral=False) -> bytes:
  fill = width - len(rendered)
  if fill <= 0:
    return rendered

  if left_align:
    return rendered + b' ' * fill

  if zero_pad and integral:
    # Zeros go between the sign and the first digit.
    if rendered[:1] == b'-':
      return b'-' + b'0' * fill + rendered[1:]
    return b'0' * fill + rendered

  return b' ' * fill + rendered


def quote(data: bytes) -> bytes:
  return b'"' + data + b'"'


def is_plural(n: int) -> bool:
  return n == 0 or n > 1


def utf16_units(text: str) -> tuple:
  encoded = codecs.encode(text, 'utf-16-le', 'surrogatepass')
  return struct.unpack('<%dH' % (len(encoded) // 2), encoded)


def utf16_to_utf8(units: Sequence[int]) -> bytes:
  packed = struct.pack('<%dH' % len(units), *(u & 0xFFFF for u in units))
  return codecs.decode(packed, 'utf-16-le', 'replace').encode('utf-8')


def system_error_message(code: int) -> str:
  return os.strerror(code)
