"""
Cursor and viewport model for Krill.

The cursor is kept in logical coordinates (cx, cy) over the buffer's rows; cy may
equal numrows, meaning "one past the last line". rx is the on-screen column of cx
once tabs are expanded, and rowoff/coloff are the first visible row and render
column of the text area.
"""
from krill.keys import Direction

class Viewport:
    def __init__(self, screenrows: int, screencols: int):
        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.rowoff = 0
        self.coloff = 0
        self.screenrows = screenrows
        self.screencols = screencols

    def resize(self, screenrows: int, screencols: int):
        """Adopt a new text-area size; the next scroll() brings the cursor back into view."""
        self.screenrows = max(1, screenrows)
        self.screencols = max(1, screencols)

    def scroll(self, buf):
        """Recompute rx and adjust the offsets so the cursor is visible."""
        self.rx = 0
        if self.cy < buf.numrows:
            self.rx = buf.rows[self.cy].cx_to_rx(self.cx)

        if self.cy < self.rowoff:
            self.rowoff = self.cy
        if self.cy >= self.rowoff + self.screenrows:
            self.rowoff = self.cy - self.screenrows + 1
        if self.rx < self.coloff:
            self.coloff = self.rx
        if self.rx >= self.coloff + self.screencols:
            self.coloff = self.rx - self.screencols + 1

    def move_cursor(self, direction: Direction, buf):
        """Move one step, wrapping across line ends for left and right."""
        row = buf.rows[self.cy] if self.cy < buf.numrows else None

        if direction == Direction.LEFT:
            if self.cx != 0:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = buf.rows[self.cy].size
        elif direction == Direction.RIGHT:
            if row is not None and self.cx < row.size:
                self.cx += 1
            elif row is not None and self.cx == row.size:
                self.cy += 1
                self.cx = 0
        elif direction == Direction.UP:
            if self.cy != 0:
                self.cy -= 1
        elif direction == Direction.DOWN:
            if self.cy < buf.numrows:
                self.cy += 1

        # snap cx to the end of a shorter line
        row = buf.rows[self.cy] if self.cy < buf.numrows else None
        rowlen = row.size if row is not None else 0
        if self.cx > rowlen:
            self.cx = rowlen

    def page(self, direction: Direction, buf):
        """Page up/down: jump to the screen edge, then move a full screen further."""
        if direction == Direction.UP:
            self.cy = self.rowoff
        else:
            self.cy = min(self.rowoff + self.screenrows - 1, buf.numrows)
        for _ in range(self.screenrows):
            self.move_cursor(direction, buf)

    def home(self):
        self.cx = 0

    def end(self, buf):
        if self.cy < buf.numrows:
            self.cx = buf.rows[self.cy].size
