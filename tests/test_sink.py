#!/usr/bin/python
# -*- coding: utf-8 -*-
# vim:ts=2:sw=2:et:ai

from kprintf.sink import FormatSink

import pytest


@pytest.mark.api
class TestFormatSink:
  def test_empty(self):
    sink = FormatSink()
    assert sink.size == 0
    assert sink.capacity == 0
    assert sink.getvalue() == b''
    assert str(sink) == ''
    assert len(sink) == 0

  def test_append_chains(self):
    sink = FormatSink()
    assert sink.append(b'ab').append('cd') is sink
    assert sink.getvalue() == b'abcd'
    assert bytes(sink) == b'abcd'

  def test_append_str_is_utf8(self):
    sink = FormatSink().append('é')
    assert sink.size == 2
    assert sink.getvalue() == b'\xc3\xa9'

  def test_initial_contents(self):
    sink = FormatSink(b'start')
    sink.append(b'!')
    assert sink.getvalue() == b'start!'

  def test_empty_append_does_not_allocate(self):
    sink = FormatSink().append(b'')
    assert sink.capacity == 0

  @pytest.mark.parametrize('cb,capacity', [
    (1, 0x80),
    (0x7F, 0x80),
    (0x80, 0x100),
    (0x81, 0x100),
    (0x12C, 0x180),
  ])
  def test_need_rounds_up_to_whole_blocks(self, cb, capacity):
    sink = FormatSink()
    sink.need(cb)
    assert sink.capacity == capacity
    assert sink.size == 0

  def test_need_never_shrinks(self):
    sink = FormatSink()
    sink.need(0x200)
    sink.need(4)
    assert sink.capacity == 0x280

  def test_capacity_grows_by_blocks(self):
    sink = FormatSink()
    sink.append(b'x' * 100)
    assert sink.capacity == 0x80
    sink.append(b'y' * 27)
    assert sink.capacity == 0x80
    sink.append(b'z')
    assert sink.capacity == 0x80
    sink.append(b'!')
    assert sink.capacity == 0x100
    assert sink.size == 129
    assert sink.getvalue() == b'x' * 100 + b'y' * 27 + b'z!'

  def test_clear_keeps_capacity(self):
    sink = FormatSink(b'abc')
    sink.clear()
    assert sink.size == 0
    assert sink.capacity == 0x80
    sink.append(b'z')
    assert sink.getvalue() == b'z'

  def test_invalid_utf8_decodes_with_replacement(self):
    assert str(FormatSink(b'a\xffb')) == 'a�b'

  def test_equality(self):
    assert FormatSink(b'ab') == FormatSink().append('a').append('b')
    assert FormatSink(b'ab') == b'ab'
    assert FormatSink(b'ab') != b'abc'
    assert FormatSink(b'ab') != 'ab'

  def test_unhashable(self):
    with pytest.raises(TypeError):
      hash(FormatSink())

  def test_repr(self):
    assert repr(FormatSink(b'hi')) == "sink(b'hi')"
