"""
Buffer module for Krill text editor.

Defines Row, a single line of the document, and Buffer, the ordered list of rows
with the row- and character-level edit operations. Each Row keeps its raw text and
a render form with tabs expanded; the render form is always rebuilt from the raw
text, never patched.
"""

TAB_STOP = 8

# Undecodable bytes in a file are carried as lone surrogates so saving writes them back unchanged
ENCODING = "utf-8"
ERRORS = "surrogateescape"

class Row:
    """One line of text: raw characters plus their tab-expanded render form."""
    def __init__(self, chars: str = "", tab_stop: int = TAB_STOP):
        self.tab_stop = tab_stop
        self.chars = chars
        self.render = ""
        self.update()

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def rsize(self) -> int:
        return len(self.render)

    def update(self):
        """Regenerate the render form from the raw characters."""
        out = []
        for ch in self.chars:
            if ch == "\t":
                out.append(" ")
                while len(out) % self.tab_stop != 0:
                    out.append(" ")
            else:
                out.append(ch)
        self.render = "".join(out)

    def cx_to_rx(self, cx: int) -> int:
        """Convert a raw column into the matching render column."""
        rx = 0
        for ch in self.chars[:cx]:
            if ch == "\t":
                rx += (self.tab_stop - 1) - (rx % self.tab_stop)
            rx += 1
        return rx

    def __repr__(self):
        return f"Row({self.chars!r})"

class Buffer:
    """Represents the document: rows in line order, the file name and the dirty count."""
    def __init__(self, filename: str = None, tab_stop: int = TAB_STOP):
        self.filename = filename  # Path to file or None for new/unsaved
        self.tab_stop = tab_stop
        self.rows = []
        self.dirty = 0

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def insert_row(self, at: int, text: str = ""):
        """Insert a new row at `at`, clamped to [0, numrows]."""
        at = max(0, min(at, len(self.rows)))
        self.rows.insert(at, Row(text, self.tab_stop))
        self.dirty += 1

    def delete_row(self, at: int):
        """Remove the row at `at`; out-of-range positions are ignored."""
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty += 1

    def row_insert_char(self, row: Row, at: int, c: str):
        """Insert one character into `row` at `at`, clamped to [0, row.size]."""
        at = max(0, min(at, row.size))
        row.chars = row.chars[:at] + c + row.chars[at:]
        row.update()
        self.dirty += 1

    def row_delete_char(self, row: Row, at: int):
        """Remove the character at `at`; positions outside the row are ignored."""
        if at < 0 or at >= row.size:
            return
        row.chars = row.chars[:at] + row.chars[at + 1:]
        row.update()
        self.dirty += 1

    def row_append_string(self, row: Row, text: str):
        """Append text to the end of a row (used when joining two lines)."""
        row.chars += text
        row.update()
        self.dirty += 1

    def rows_to_string(self) -> str:
        """Join all rows with a newline after each, ready to be written out."""
        return "".join(row.chars + "\n" for row in self.rows)

    def load(self, lines):
        """Append every line as a row. A freshly loaded buffer is clean."""
        for line in lines:
            self.insert_row(len(self.rows), line)
        self.dirty = 0

    def save_to_file(self, filename: str = None) -> int:
        """
        Write the buffer contents to `filename` (default self.filename).
        Returns the number of bytes written. Raises OSError on failure, in which
        case the rows are left exactly as they were.
        """
        filename = filename or self.filename
        data = self.rows_to_string().encode(ENCODING, ERRORS)
        with open(filename, 'wb') as f:
            f.write(data)
        self.dirty = 0
        return len(data)

def read_lines(filename: str):
    """
    Yield the lines of a file with trailing newline and carriage-return
    characters stripped. Raises OSError if the file cannot be read.
    """
    with open(filename, 'rb') as f:
        for raw in f:
            yield raw.rstrip(b"\r\n").decode(ENCODING, ERRORS)
