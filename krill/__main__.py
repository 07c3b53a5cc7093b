"""
Main entry point and editor context for the Krill text editor.
"""
import sys
import time

from krill import buffer, config, logger, terminal, viewport
from krill.ui import input as ui_input
from krill.ui import screen

# Rows reserved below the text area for the status bar and the message bar
BAR_ROWS = 2

class EditorContext:
    """
    Holds the state of one editing session: the terminal, the document buffer,
    the cursor/viewport, the status message and the quit countdown. It is passed
    to every command instead of living in a global.
    """
    def __init__(self, term, settings: config.Settings = None):
        self.terminal = term
        self.settings = settings or config.Settings()

        self.buffer = buffer.Buffer(tab_stop=self.settings.tab_stop)
        rows, cols = term.get_window_size()
        self.view = viewport.Viewport(max(1, rows - BAR_ROWS), max(1, cols))

        # Message bar
        self.status_message = ""
        self.status_time = 0.0

        self.quit_times = self.settings.quit_times

        # Running flag
        self.exit_flag = False

    def open(self, filename: str):
        """Load `filename` into the buffer. Raises OSError if it cannot be read."""
        self.buffer.filename = filename
        self.buffer.load(buffer.read_lines(filename))
        logger.log(f"opened {filename} ({self.buffer.numrows} lines)")

    def set_status_message(self, msg: str, log: bool = True):
        """Show `msg` in the message bar for the next few seconds."""
        self.status_message = msg
        self.status_time = time.time()
        if log and msg:
            logger.log(msg)

    def handle_resize(self):
        """Pick up a new terminal size after SIGWINCH."""
        self.terminal.resized = False
        rows, cols = self.terminal.get_window_size()
        self.view.resize(rows - BAR_ROWS, cols)
        logger.log(f"resized to {rows}x{cols}")

    def graceful_exit(self):
        logger.log("Editor exited.")
        self.exit_flag = True

def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    settings = config.load_settings()
    logger.configure(settings.log_file)

    term = terminal.Terminal()
    try:
        with term.raw_mode():
            context = EditorContext(term, settings)
            if args:
                context.open(args[0])
            context.set_status_message("HELP: Ctrl-S = save | Ctrl-Q = quit")

            while not context.exit_flag:
                screen.refresh_screen(context)
                key = term.read_key()
                if key is not None:
                    ui_input.process_keypress(context, key)
    except (terminal.TerminalError, OSError) as e:
        try:
            term.clear_screen()
        except terminal.TerminalError:
            pass
        logger.log(f"fatal: {e}")
        print(f"krill: {e}", file=sys.stderr)
        return 1
    return 0

def run():
    """Console-script entry point."""
    sys.exit(main())

if __name__ == "__main__":
    run()
