"""
Input handling for Krill text editor.

Maps each decoded key to an editing command or a cursor movement on the context.
"""
from krill import commands, keys

QUIT_KEY = keys.ctrl_key('q')
SAVE_KEY = keys.ctrl_key('s')
REFRESH_KEY = keys.ctrl_key('l')
CTRL_H = keys.ctrl_key('h')

def process_keypress(context, key: keys.Key):
    """Handle one key press."""
    buf, view = context.buffer, context.view

    if key == QUIT_KEY:
        commands.quit_editor(context)
        # the countdown only keeps running while quit is pressed repeatedly
        return

    if key == keys.ENTER:
        commands.insert_newline(context)
    elif key == SAVE_KEY:
        commands.save(context)
    elif key == keys.HOME:
        view.home()
    elif key == keys.END:
        view.end(buf)
    elif key in (keys.BACKSPACE, CTRL_H, keys.DELETE):
        # Delete removes the character under the cursor: step over it, then delete left
        if key == keys.DELETE:
            view.move_cursor(keys.Direction.RIGHT, buf)
        commands.delete_char(context)
    elif key in (keys.PAGE_UP, keys.PAGE_DOWN):
        direction = keys.Direction.UP if key == keys.PAGE_UP else keys.Direction.DOWN
        view.page(direction, buf)
    elif isinstance(key, keys.Arrow):
        view.move_cursor(key.direction, buf)
    elif key in (REFRESH_KEY, keys.ESCAPE):
        pass
    elif keys.is_insertable(key):
        commands.insert_char(context, key.char)

    context.quit_times = context.settings.quit_times
