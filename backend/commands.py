import re

from models import Command

LIST_PHRASES = ("list", "list tasks")
LIST_PREFIX = "show tasks"
ADD_PREFIXES = ("add ", "add task ", "create ")

# Longest keyword first so "add task buy milk" strips "add task", not "add"
_ADD_KEYWORD_RE = re.compile(r"^\s*(add task|add|create)\s+", re.IGNORECASE)
# Zero-width so overlapping markers (" by on ") are all seen
_DUE_MARKER_RE = re.compile(r"(?= (?:by|on) )", re.IGNORECASE)


def _split_due_date(remainder: str) -> tuple[str, str | None]:
    """
    Split "<title> by|on <due>" at the last marker occurrence.
    Returns (title, due_date); due_date is None when no marker is present
    or nothing follows it.
    """
    matches = list(_DUE_MARKER_RE.finditer(remainder))
    if not matches:
        return remainder.strip(), None
    idx = matches[-1].start()
    # Both markers are four characters long
    due_date = remainder[idx + 4:].strip()
    return remainder[:idx].strip(), due_date or None


def parse_command(message: str) -> Command:
    """
    Naively classify a chat message as add, list or none.

    Works best for short commands like:
        add buy groceries by Friday
        create finish the report
        list tasks
    Anything else falls through as "none" so the model can answer it.
    """
    trimmed = message.strip()
    lower = trimmed.lower()

    if lower in LIST_PHRASES or lower.startswith(LIST_PREFIX):
        return Command(type="list")

    if lower.startswith(ADD_PREFIXES):
        remainder = _ADD_KEYWORD_RE.sub("", trimmed, count=1)
        title, due_date = _split_due_date(remainder)
        if not title:
            return Command(type="none")
        return Command(type="add", title=title, due_date=due_date)

    return Command(type="none")
