"""
Editing and session commands for Krill text editor.

Every command takes the EditorContext and works on its buffer and viewport:
typing, splitting and joining lines, saving and quitting.
"""
from krill import logger
from krill.ui import screen

def insert_char(context, c: str):
    """Insert `c` at the cursor, starting a new line if the cursor is past the end."""
    buf, view = context.buffer, context.view
    if view.cy == buf.numrows:
        buf.insert_row(buf.numrows, "")
    buf.row_insert_char(buf.rows[view.cy], view.cx, c)
    view.cx += 1

def insert_newline(context):
    """Split the current line at the cursor and move to the start of the new line."""
    buf, view = context.buffer, context.view
    if view.cx == 0:
        buf.insert_row(view.cy, "")
    else:
        row = buf.rows[view.cy]
        buf.insert_row(view.cy + 1, row.chars[view.cx:])
        row.chars = row.chars[:view.cx]
        row.update()
    view.cy += 1
    view.cx = 0

def delete_char(context):
    """Delete the character left of the cursor, joining lines at column 0."""
    buf, view = context.buffer, context.view
    if view.cy == buf.numrows:
        return
    if view.cx == 0 and view.cy == 0:
        return

    row = buf.rows[view.cy]
    if view.cx > 0:
        buf.row_delete_char(row, view.cx - 1)
        view.cx -= 1
    else:
        prev = buf.rows[view.cy - 1]
        view.cx = prev.size
        buf.row_append_string(prev, row.chars)
        buf.delete_row(view.cy)
        view.cy -= 1

def save(context):
    """
    Write the buffer to disk, asking for a file name first if there is none.
    Failures are reported in the message bar; the buffer is never lost.
    """
    buf = context.buffer
    if buf.filename is None:
        name = screen.prompt_input(context, "Save as: %s (ESC to cancel)")
        if name is None:
            context.set_status_message("Save aborted")
            return
        buf.filename = name

    try:
        written = buf.save_to_file()
    except OSError as e:
        context.set_status_message(f"Can't save! I/O error: {e.strerror or e}")
        return
    context.set_status_message(f"{written} bytes written to disk")

def quit_editor(context) -> bool:
    """
    Quit, unless there are unsaved changes and the user has not yet pressed quit
    enough times in a row. Returns True if the editor is exiting.
    """
    if context.buffer.dirty and context.quit_times > 0:
        context.set_status_message(
            f"WARNING!!! File has unsaved changes. "
            f"Press Ctrl-Q {context.quit_times} more times to quit."
        )
        context.quit_times -= 1
        return False
    context.terminal.clear_screen()
    logger.log("q: quit")
    context.graceful_exit()
    return True
