#!/usr/bin/python
# -*- coding: utf-8 -*-
# vim:ts=2:sw=2:et:ai


class FormatSink(object):
  """A byte buffer that formatted output is appended to.

  Capacity grows in whole blocks, so a run of small appends reallocates only
  once per block. The bytes past `size` are scratch space and never part of the
  value.
  """
  __slots__ = '_buffer', '_size'

  block_size = 0x80

  def __init__(self, initial=b''):
    self._buffer = bytearray()
    self._size = 0
    if initial:
      self.append(initial)

  @property
  def size(self):
    return self._size

  @property
  def capacity(self):
    return len(self._buffer)

  def need(self, cb):
    if cb > len(self._buffer):
      cb >>= 7
      cb <<= 7
      cb += self.block_size  # Round up to the next whole block.
      self._buffer.extend(bytes(cb - len(self._buffer)))

  def append(self, data):
    if isinstance(data, str):
      data = data.encode('utf-8')
    cb = len(data)
    if not cb:
      return self
    end = self._size + cb
    self.need(end)
    self._buffer[self._size:end] = data
    self._size = end
    return self

  def clear(self):
    self._size = 0
    return self

  def getvalue(self) -> bytes:
    return bytes(self._buffer[:self._size])

  def __len__(self):
    return self._size

  def __bytes__(self):
    return self.getvalue()

  def __str__(self):
    return self.getvalue().decode('utf-8', errors='replace')

  def __eq__(self, other):
    if isinstance(other, FormatSink):
      return self.getvalue() == other.getvalue()
    if isinstance(other, (bytes, bytearray)):
      return self.getvalue() == bytes(other)
    return NotImplemented

  __hash__ = None

  def __repr__(self):
    return 'sink(%s)' % repr(self.getvalue())
