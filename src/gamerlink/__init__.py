"""Direct messaging and conversation index for the gamer social platform."""

__version__ = "0.1.0"
