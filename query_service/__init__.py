"""Log query gateway in front of a Quickwit index."""
