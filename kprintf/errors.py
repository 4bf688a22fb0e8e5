#!/usr/bin/python
# -*- coding: utf-8 -*-
# vim:ts=2:sw=2:et:ai


class FormatError(Exception):
  pass


class FormatArgumentError(FormatError):
  pass


def malformed_error(text, offset, truncated=False):
  if truncated:
    return "Unterminated directive '%s'; reached end of input at position %s" % (
        text.decode('utf-8', errors='replace'), offset)
  return "Unrecognized directive '%s' at position %s" % (
      text.decode('utf-8', errors='replace'), offset)


def argument_error(directive, expected, value=None, exhausted=False):
  message = "Directive '%s' at position %s " % (
      directive.text.decode('utf-8', errors='replace'), directive.start)
  if exhausted:
    return message + "has no argument left to consume"
  return message + "expects %s, got %s" % (expected, type(value).__name__)


def text_error(what, value):
  return "Expected text for %s, got %s" % (what, type(value).__name__)
