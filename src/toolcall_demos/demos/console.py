"""Console helpers shared by the demos."""

from datetime import datetime

QUIT_COMMAND = "quit"


def read_message(prompt: str = "Enter your message:") -> str | None:
    """Prompt for a line of input.

    Returns:
        str | None: The line, or None on end of input or the quit command
    """
    print(prompt)
    try:
        line = input()
    except EOFError:
        return None
    if line.strip().lower() == QUIT_COMMAND:
        return None
    return line


def timestamp() -> str:
    """Current wall-clock time as HH:MM:SS.mmm."""
    return datetime.now().strftime("%H:%M:%S.%f")[:-3]
