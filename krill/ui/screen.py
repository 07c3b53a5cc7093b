"""
krill/ui/screen.py

Builds each frame of the editor: text rows, status bar and message bar, all
collected into one AppendBuffer and handed to the terminal in a single write so
the screen never shows a half-drawn frame. Also holds the message-bar prompt.
"""

import time
from wcwidth import wcswidth, wcwidth

from krill import __version__, keys
from krill.buffer import ENCODING, ERRORS

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CURSOR_HOME = "\x1b[H"
CLEAR_LINE = "\x1b[K"
INVERT = "\x1b[7m"
RESET = "\x1b[m"

class AppendBuffer:
    """Growable byte accumulator for one full-screen update."""
    def __init__(self):
        self.data = bytearray()

    def append(self, s):
        if isinstance(s, str):
            s = s.encode(ENCODING, ERRORS)
        self.data += s

    def __len__(self):
        return len(self.data)

    def __bytes__(self):
        return bytes(self.data)

def display_width(text: str) -> int:
    """Visual width of `text` in terminal cells."""
    width = wcswidth(text)
    if width < 0:
        # non-printables: count every character as one cell
        width = sum(max(wcwidth(ch), 1) for ch in text)
    return width

def clip_to_width(text: str, width: int) -> str:
    """Trim `text` so it occupies at most `width` cells."""
    if display_width(text) <= width:
        return text
    out = []
    used = 0
    for ch in text:
        w = max(wcwidth(ch), 1)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)

def draw_line(ab: AppendBuffer, text: str):
    """
    Append a slice of a row. C0 controls show as inverted ^X glyphs; DEL, C1
    controls and undecodable bytes show as an inverted '?'.
    """
    for ch in text:
        code = ord(ch)
        if code < 32:
            ab.append(INVERT + chr(code + 64) + RESET)
        elif code == 127 or 0x80 <= code <= 0x9F or 0xDC80 <= code <= 0xDCFF:
            ab.append(INVERT + "?" + RESET)
        else:
            ab.append(ch)

def draw_welcome(ab: AppendBuffer, screencols: int):
    welcome = clip_to_width(f"Krill editor -- version {__version__}", screencols)
    padding = (screencols - display_width(welcome)) // 2
    if padding:
        ab.append("~")
        padding -= 1
    ab.append(" " * padding)
    ab.append(welcome)

def draw_rows(context, ab: AppendBuffer):
    """Draw the text area: one line per screen row, '~' past the end of the document."""
    buf = context.buffer
    view = context.view
    for y in range(view.screenrows):
        filerow = y + view.rowoff
        if filerow >= buf.numrows:
            if buf.numrows == 0 and y == view.screenrows // 3:
                draw_welcome(ab, view.screencols)
            else:
                ab.append("~")
        else:
            render = buf.rows[filerow].render
            draw_line(ab, clip_to_width(render[view.coloff:view.coloff + view.screencols], view.screencols))
        ab.append(CLEAR_LINE)
        ab.append("\r\n")

def draw_status_bar(context, ab: AppendBuffer):
    """Inverted bar: file name, line count and modified flag left, cursor line right."""
    buf = context.buffer
    cols = context.view.screencols
    name = (buf.filename or "[No Name]")[:20]
    modified = "(modified)" if buf.dirty else ""
    status = clip_to_width(f"{name} - {buf.numrows} lines {modified}", cols)
    rstatus = f"{context.view.cy + 1}/{buf.numrows}"

    ab.append(INVERT)
    ab.append(status)
    length = display_width(status)
    while length < cols:
        if cols - length == len(rstatus):
            ab.append(rstatus)
            break
        ab.append(" ")
        length += 1
    ab.append(RESET)
    ab.append("\r\n")

def draw_message_bar(context, ab: AppendBuffer):
    ab.append(CLEAR_LINE)
    message = clip_to_width(context.status_message, context.view.screencols)
    if message and time.time() - context.status_time < context.settings.message_timeout:
        ab.append(message)

def compose_frame(context) -> bytes:
    """Scroll the viewport and build the complete escape-sequence stream for one frame."""
    view = context.view
    view.scroll(context.buffer)

    ab = AppendBuffer()
    ab.append(HIDE_CURSOR)
    ab.append(CURSOR_HOME)
    draw_rows(context, ab)
    draw_status_bar(context, ab)
    draw_message_bar(context, ab)
    ab.append(f"\x1b[{view.cy - view.rowoff + 1};{view.rx - view.coloff + 1}H")
    ab.append(SHOW_CURSOR)
    return bytes(ab)

def refresh_screen(context):
    """Redraw the whole screen with a single write."""
    if context.terminal.resized:
        context.handle_resize()
    context.terminal.write(compose_frame(context))

def prompt_input(context, prompt: str):
    """
    Ask for a line of text in the message bar. `prompt` contains one '%s' that is
    replaced by what has been typed so far. Returns the text, or None if the user
    pressed Escape or confirmed an empty answer.
    """
    typed = ""
    while True:
        context.set_status_message(prompt % typed, log=False)
        refresh_screen(context)

        key = context.terminal.read_key()
        if key is None:
            continue
        if key in (keys.DELETE, keys.BACKSPACE, keys.ctrl_key('h')):
            typed = typed[:-1]
        elif key == keys.ESCAPE:
            context.set_status_message("", log=False)
            return None
        elif key == keys.ENTER:
            context.set_status_message("", log=False)
            return typed or None
        elif keys.is_insertable(key) and key != keys.TAB:
            typed += key.char
