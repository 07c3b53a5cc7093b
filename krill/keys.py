"""
Logical key events produced by the terminal decoder.

A key is one of Character, Arrow, Delete, Home, End, PageUp, PageDown or Escape.
They are frozen dataclasses, so a decoded key can be compared directly against
the constants below (``key == HOME``, ``key == ctrl_key('q')``).
"""
import curses.ascii
from dataclasses import dataclass
from enum import Enum

class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

@dataclass(frozen=True)
class Key:
    """Base class for every decoded key."""

@dataclass(frozen=True)
class Character(Key):
    """A printable character or a control code, delivered verbatim."""
    char: str

@dataclass(frozen=True)
class Arrow(Key):
    direction: Direction

@dataclass(frozen=True)
class Delete(Key):
    pass

@dataclass(frozen=True)
class Home(Key):
    pass

@dataclass(frozen=True)
class End(Key):
    pass

@dataclass(frozen=True)
class PageUp(Key):
    pass

@dataclass(frozen=True)
class PageDown(Key):
    pass

@dataclass(frozen=True)
class Escape(Key):
    """A lone ESC, or any escape sequence that was not recognised."""

ARROW_UP = Arrow(Direction.UP)
ARROW_DOWN = Arrow(Direction.DOWN)
ARROW_LEFT = Arrow(Direction.LEFT)
ARROW_RIGHT = Arrow(Direction.RIGHT)
DELETE = Delete()
HOME = Home()
END = End()
PAGE_UP = PageUp()
PAGE_DOWN = PageDown()
ESCAPE = Escape()

ENTER = Character("\r")
TAB = Character("\t")
BACKSPACE = Character(chr(curses.ascii.DEL))

def ctrl_key(ch: str) -> Character:
    """The key produced by holding Ctrl with `ch`, e.g. ctrl_key('q') is 0x11."""
    return Character(curses.ascii.ctrl(ch))

def is_insertable(key: Key) -> bool:
    """True for keys that should be typed into the document (printables and tab)."""
    if not isinstance(key, Character):
        return False
    return key == TAB or (not curses.ascii.iscntrl(key.char) and key.char.isprintable())
