"""
Logger module for the Krill text editor.

Provides a simple file-based logger for debugging and error tracking. The editor
owns the terminal while it runs, so nothing may be printed; everything that would
be worth a line on stderr goes to the log file instead.
"""
import datetime
import os

# Define the log file path (None disables logging)
LOG_FILE_PATH = os.path.expanduser("~/krill/krill.log")

def configure(path) -> None:
    """Select the log file. An empty path or None turns logging off."""
    global LOG_FILE_PATH
    LOG_FILE_PATH = os.path.expanduser(path) if path else None

def log(message: str) -> None:
    """Append a timestamped message to the log file."""
    if not LOG_FILE_PATH:
        return
    try:
        directory = os.path.dirname(LOG_FILE_PATH)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(LOG_FILE_PATH, 'a', encoding='utf-8') as f:
            timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            f.write(f"[{timestamp}] {message}\n")
    except OSError:
        # If logging fails (e.g., file not writable), ignore to avoid crashing the editor.
        pass
