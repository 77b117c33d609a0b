from __future__ import annotations
import logging
import os
import sys
from typing import Iterable, Optional

from .vreader import Form, Reader, ReaderError, UnexpectedEOFError
from .vprinter import to_source

logger = logging.getLogger(__name__)

HISTFILE = os.path.join(os.path.expanduser("~"), ".violet_history")

# Set up readline for line editing
try:
    import readline

    try:
        readline.read_history_file(HISTFILE)
        # Limit history to 1000 lines
        readline.set_history_length(1000)
    except (FileNotFoundError, PermissionError):
        pass

    def save_history():
        try:
            readline.write_history_file(HISTFILE)
        except (PermissionError, OSError):
            pass

except ImportError:
    # readline not available (e.g., on Windows)
    def save_history():
        pass

BANNER = """violet read-print loop. Forms: "strings", symbols, :keywords, (lists).
Each complete form is read and printed back; nothing is evaluated. Ctrl-D to exit.
"""


def configure_logging():
    level = os.environ.get("VIOLET_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _render(forms: Iterable[Form]) -> list[str]:
    out = []
    for form in forms:
        try:
            out.append(to_source(form))
        except ValueError as ex:
            out.append(f"! Error: {ex}")
    return out


def read_print(src, file: str = "<input>") -> list[str]:
    """Read every form of ``src`` permissively and return each one printed.

    Forms the printer cannot express (an empty symbol left by a stray ``)``,
    for one) come back as ``! Error: ...`` lines instead of stopping the run.
    """
    return _render(Reader(src, file=file))


def run_repl():
    print(BANNER)
    buf = ""; prompt = "> "
    try:
        while True:
            try:
                line = input(prompt)
            except EOFError:
                print()
                if buf.strip():
                    # Flush the incomplete form as far as it was typed
                    print("! Incomplete input at end of session, read as:")
                    for text in _render(Reader(buf, file="<repl>")):
                        print(text)
                break
            buf += line + "\n"
            try:
                forms = Reader(buf, file="<repl>", strict=True).read()
            except UnexpectedEOFError:
                prompt = "… "; continue
            except ReaderError as ex:
                print(f"! Error: {ex}")
                buf = ""; prompt = "> "; continue
            prompt = "> "
            for text in _render(forms):
                print(text)
            buf = ""
    finally:
        # Save history when exiting
        save_history()


def main(argv: Optional[list[str]] = None) -> int:
    configure_logging()
    args = sys.argv[1:] if argv is None else argv
    if not args:
        run_repl()
        return 0
    for path in args:
        with open(path, "rb") as fh:
            src = fh.read()
        logger.debug("read %d bytes from %s", len(src), path)
        for text in read_print(src, file=path):
            print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
