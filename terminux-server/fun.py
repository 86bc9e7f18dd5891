# fun.py
# Cosmetic commands: pure string generators, no filesystem access.
from datetime import datetime

from markup import Colors, paint

HELP_ENTRIES = [
    ("Files & navigation:", [
        ("ls [path]", "List directory contents"),
        ("cd [path]", "Change directory"),
        ("pwd", "Print working directory"),
        ("mkdir [name]", "Create a directory"),
        ("touch [name]", "Create an empty file"),
        ("rm [name]", "Remove a file or directory"),
        ("cat [file]", "Show file contents"),
    ]),
    ("Text editor:", [
        ("nano [file]", "Edit a file (^S save, ^X exit)"),
    ]),
    ("System:", [
        ("clear", "Clear the screen"),
        ("whoami", "Print the current user"),
        ("date", "Show date and time"),
        ("echo [text]", "Print text"),
        ("tree", "Show the current directory as a tree"),
    ]),
    ("Fun:", [
        ("neofetch", "System information"),
        ("cowsay [text]", "A talking cow"),
        ("sl", "Steam locomotive"),
        ("matrix", "Enter the matrix"),
        ("fortune", "Words of wisdom"),
        ("figlet [text]", "Big banner text"),
        ("joke", "A programmer joke"),
        ("weather", "Local forecast"),
    ]),
]

FORTUNES = [
    "Today is a good day to code!",
    "The best way to predict the future is to implement it.",
    "Code is poetry written for machines to understand.",
    "Every expert was once a beginner. Keep coding!",
    "Talk is cheap. Show me the code. - Linus Torvalds",
]

JOKES = [
    "Why do programmers prefer dark mode?\nBecause light attracts bugs!",
    "How many programmers does it take to change a light bulb?\nNone. That's a hardware problem.",
    "Why do Java developers wear glasses?\nBecause they can't C#",
    "What's the object-oriented way to become wealthy?\nInheritance!",
]

WEATHERS = ["Sunny", "Partly Cloudy", "Rainy"]

SL_ART = r"""      ====        ________                ___________
  _D _|  |_______/        \__I_I_____===__|_________|
   |(_)---  |   H\________/ |   |        =|___ ___|
   /     |  |   H  |  |     |   |         ||_| |_||
  |      |  |   H  |__--------------------| [___] |
  | ________|___H__/__|_____/[][]~\_______|       |
  |/ |   |-----------I_____I [][] []  D   |=======|__
__/ =| o |=-~~\  /~~\  /~~\  /~~\ ____Y___________|__
 |/-=|___|=O=====O=====O=====O   |_____/~\___/
  \_/      \__/  \__/  \__/  \__/      \_/"""

FIGLET_ART = """████████ ████████ ██████   ███    ███ ██ ███    ██ ██    ██ ██   ██
   ██    ██       ██   ██  ████  ████ ██ ████   ██ ██    ██  ██ ██
   ██    █████    ██████   ██ ████ ██ ██ ██ ██  ██ ██    ██   ███
   ██    ██       ██   ██  ██  ██  ██ ██ ██  ██ ██ ██    ██  ██ ██
   ██    ████████ ██   ██  ██      ██ ██ ██   ████  ██████  ██   ██"""

COW = r"""        \   ^__^
         \  (oo)\_______
            (__)\       )\/\
                ||----w |
                ||     ||"""


def help_text(color=True):
    lines = ["Available commands:"]
    for section, entries in HELP_ENTRIES:
        lines.append("")
        lines.append(paint(section, Colors.YELLOW, color))
        for usage, desc in entries:
            name, _, rest = usage.partition(" ")
            padded = (paint(name, Colors.BLUE, color) + (" " + rest if rest else "")
                      + " " * max(1, 16 - len(usage)))
            lines.append(f"  {padded}{desc}")
    return "\n".join(lines)


def whoami():
    return "user"


def date(now=None):
    now = now or datetime.now()
    return now.strftime("%m/%d/%Y, %I:%M:%S %p")


def echo(text):
    return text


def neofetch(color=True):
    def field(label, value):
        return f"  {paint(label, Colors.YELLOW, color)} {value}"

    return "\n".join([
        paint("Terminux 1.0", Colors.GREEN, color),
        paint("-" * 20, Colors.BLUE, color),
        field("OS:", "Ubuntu (SSH)"),
        field("Shell:", "terminux"),
        field("Terminal:", "xterm-256color"),
        field("Language:", "English"),
    ])


def cowsay(text, color=True):
    message = text or "Moo!"
    top = "-" * (len(message) + 2)
    bubble = [
        paint(f" {top} ", Colors.YELLOW, color),
        paint("<", Colors.YELLOW, color) + f" {message} " + paint(">", Colors.YELLOW, color),
        paint(f" {top} ", Colors.YELLOW, color),
    ]
    return "\n".join(bubble) + "\n" + paint(COW, Colors.GREEN, color)


def sl(color=True):
    return paint(SL_ART, Colors.YELLOW, color) + "\n" + paint("Steam Locomotive!", Colors.BLUE, color)


def matrix(rng, color=True, rows=10, cols=60):
    chars = ["0", "1", " ", " ", " "]
    rain = "\n".join(
        "".join(rng.choice(chars) for _ in range(cols)) for _ in range(rows)
    )
    return paint(rain, Colors.GREEN, color) + "\n" + paint("Welcome to the Matrix...", Colors.BLUE, color)


def fortune(rng, color=True):
    return paint(rng.choice(FORTUNES), Colors.YELLOW, color)


def figlet(text, color=True):
    if not text:
        return paint(FIGLET_ART, Colors.GREEN, color)
    banner = " ".join(text.upper()[:8])
    rule = "=" * (len(banner) + 4)
    return paint(f"{rule}\n  {banner}\n{rule}", Colors.GREEN, color)


def joke(rng, color=True):
    return paint(rng.choice(JOKES), Colors.YELLOW, color)


def weather(rng, color=True):
    desc = rng.choice(WEATHERS)
    temp = rng.randint(5, 34)
    return paint(f"{desc}\nTemperature: {temp}°C\nLocation: Terminux City", Colors.BLUE, color)
