# -*- coding: utf-8 -*-

from .errors import FormatArgumentError, FormatError
from .kformat import (compile, fmtcontext, format, format_into, parse, printf,
                      printf_append, printf_resource)
from .sink import FormatSink
