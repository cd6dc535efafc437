from __future__ import annotations

from .fragment import Pause, WaitForKey, instant, typed
from .sequencer import Slide, slide


def demo_slides(delay: float = 0.03) -> list[Slide]:
    """Built-in presentation shown by the command line entry point."""

    fast = delay / 3
    return [
        slide(
            typed("Introducing...\n\n", delay * 3),
            typed("termslides", delay * 2, "bold cyan"),
            typed("\nA small library for command line presentations.\n\n", delay),
            typed("(Press enter to go to the next slide.)", fast, "italic"),
        ),
        slide(
            typed("Slides are typed out one character at a time, ", delay),
            typed("with optional styling", delay, "bold magenta"),
            instant("."),
            instant("\n\nA slide can hold back its ending until you press a key:\n"),
            WaitForKey(),
            typed("...like this. ", delay),
            Pause(delay * 10),
            typed("Emoji stay whole too: 👍🏽 🇯🇵\n", delay),
        ),
        slide(
            typed("That's all. Thanks for watching!", delay, "green"),
        ),
    ]
