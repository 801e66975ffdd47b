"""XML export of validated offers."""
