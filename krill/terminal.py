"""
Terminal adapter for Krill.

Puts the terminal into raw mode, turns the incoming byte stream into logical keys
and finds out how large the screen is. Reads use VMIN=0/VTIME=1, so a read returns
empty after ~100ms without input; the key reader simply tries again, and the
escape decoder treats a missing follow-up byte as a plain ESC.
"""
import atexit
import contextlib
import os
import re
import signal
import sys
import termios

from krill import keys, logger

ESC = b"\x1b"

# ESC [ <digit> ~
_TILDE_KEYS = {
    b"1": keys.HOME,
    b"3": keys.DELETE,
    b"4": keys.END,
    b"5": keys.PAGE_UP,
    b"6": keys.PAGE_DOWN,
    b"7": keys.HOME,
    b"8": keys.END,
}

# ESC [ <letter>
_CSI_KEYS = {
    b"A": keys.ARROW_UP,
    b"B": keys.ARROW_DOWN,
    b"C": keys.ARROW_RIGHT,
    b"D": keys.ARROW_LEFT,
    b"H": keys.HOME,
    b"F": keys.END,
}

# ESC O <letter>
_SS3_KEYS = {
    b"H": keys.HOME,
    b"F": keys.END,
}

_CURSOR_REPORT = re.compile(rb"\x1b\[(\d+);(\d+)")

class TerminalError(Exception):
    """A terminal operation failed; the editor cannot continue."""

def _utf8_length(lead: int) -> int:
    """Number of bytes in the UTF-8 sequence that starts with `lead`."""
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1

def _is_csi_final(byte: bytes) -> bool:
    return 0x40 <= byte[0] <= 0x7E

def _skip_csi(last: bytes, read_byte):
    """Consume the rest of a CSI sequence, up to its final byte or a timed-out read."""
    while last and not _is_csi_final(last):
        last = read_byte()

def decode_key(first: bytes, read_byte) -> keys.Key:
    """
    Decode one key. `first` is the byte already read; `read_byte` returns the next
    byte, or b"" when nothing arrived in time.
    """
    if first != ESC:
        length = _utf8_length(first[0])
        data = first
        while len(data) < length:
            nxt = read_byte()
            if not nxt:
                break
            data += nxt
        return keys.Character(data.decode("utf-8", "replace")[0])

    seq0 = read_byte()
    if not seq0:
        return keys.ESCAPE
    seq1 = read_byte()
    if not seq1:
        return keys.ESCAPE

    if seq0 == b"[":
        if seq1.isdigit():
            seq2 = read_byte()
            if seq2 == b"~":
                return _TILDE_KEYS.get(seq1, keys.ESCAPE)
            _skip_csi(seq2, read_byte)
            return keys.ESCAPE
        if _is_csi_final(seq1):
            return _CSI_KEYS.get(seq1, keys.ESCAPE)
        _skip_csi(seq1, read_byte)
        return keys.ESCAPE
    if seq0 == b"O":
        return _SS3_KEYS.get(seq1, keys.ESCAPE)
    return keys.ESCAPE

def parse_cursor_report(report: bytes):
    """Parse an ``ESC [ rows ; cols R`` device status reply into (rows, cols)."""
    match = _CURSOR_REPORT.match(report)
    if not match:
        raise TerminalError(f"unexpected cursor position report: {report!r}")
    return int(match.group(1)), int(match.group(2))

class Terminal:
    """Raw-mode terminal on a pair of file descriptors (stdin/stdout by default)."""
    def __init__(self, fd_in: int = None, fd_out: int = None):
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self.orig_termios = None
        self.resized = False
        self._old_sigwinch = None
        self._atexit_registered = False

    # ------------------------------------------------------------------
    # raw mode
    # ------------------------------------------------------------------
    def enable_raw_mode(self):
        try:
            self.orig_termios = termios.tcgetattr(self.fd_in)
        except termios.error as e:
            raise TerminalError(f"tcgetattr: {e}") from e
        if not self._atexit_registered:
            atexit.register(self.disable_raw_mode)
            self._atexit_registered = True

        raw = termios.tcgetattr(self.fd_in)
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        # return after at most 100ms, with or without input
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = 1
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e

        self._old_sigwinch = signal.signal(signal.SIGWINCH, self._on_sigwinch)
        logger.log("raw mode enabled")

    def disable_raw_mode(self):
        """Restore the attributes saved by enable_raw_mode(). Safe to call twice."""
        if self.orig_termios is None:
            return
        if self._old_sigwinch is not None:
            signal.signal(signal.SIGWINCH, self._old_sigwinch)
            self._old_sigwinch = None
        orig, self.orig_termios = self.orig_termios, None
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, orig)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e
        logger.log("raw mode disabled")

    @contextlib.contextmanager
    def raw_mode(self):
        self.enable_raw_mode()
        try:
            yield self
        finally:
            self.disable_raw_mode()

    def _on_sigwinch(self, signum, frame):
        self.resized = True

    # ------------------------------------------------------------------
    # input / output
    # ------------------------------------------------------------------
    def read_byte(self) -> bytes:
        """Read one byte, or return b"" if the read timed out."""
        try:
            return os.read(self.fd_in, 1)
        except (BlockingIOError, InterruptedError):
            return b""
        except OSError as e:
            raise TerminalError(f"read: {e}") from e

    def read_key(self):
        """
        Wait for one keypress and decode it. Returns None instead if the window
        was resized while waiting, so the caller can redraw straight away.
        """
        first = b""
        while not first:
            if self.resized:
                return None
            first = self.read_byte()
        return decode_key(first, self.read_byte)

    def write(self, data: bytes):
        """Write all of `data`, continuing after partial writes."""
        view = memoryview(data)
        while view:
            try:
                written = os.write(self.fd_out, view)
            except InterruptedError:
                continue
            except OSError as e:
                raise TerminalError(f"write: {e}") from e
            view = view[written:]

    def clear_screen(self):
        self.write(b"\x1b[2J\x1b[H")

    # ------------------------------------------------------------------
    # window size
    # ------------------------------------------------------------------
    def get_cursor_position(self):
        """Ask the terminal where the cursor is (device status report)."""
        self.write(b"\x1b[6n")
        report = b""
        while len(report) < 31:
            ch = self.read_byte()
            if not ch or ch == b"R":
                break
            report += ch
        return parse_cursor_report(report)

    def get_window_size(self):
        """Return (rows, cols) of the terminal."""
        try:
            size = os.get_terminal_size(self.fd_out)
        except OSError:
            size = None
        if size is None or size.columns == 0:
            logger.log("window size query failed, falling back to cursor report")
            self.write(b"\x1b[999C\x1b[999B")
            return self.get_cursor_position()
        return size.lines, size.columns
