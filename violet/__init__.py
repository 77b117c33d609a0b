from __future__ import annotations
from .vreader import (Form, String, Symbol, Keyword, List, Reader, ReaderError,
                      UnexpectedEOFError, read_form, read_all)
from .vprinter import to_source, to_bytes
