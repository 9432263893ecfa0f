"""Typing material: quotes and word pools for generated drills."""

QUOTES = [
    "The only way to do great work is to love what you do.",
    "Simplicity is prerequisite for reliability.",
    "Programs must be written for people to read, and only incidentally for machines to execute.",
    "Talk is cheap. Show me the code.",
    "First, solve the problem. Then, write the code.",
    "Any fool can write code that a computer can understand. Good programmers write code that humans can understand.",
    "It always seems impossible until it's done.",
    "Well begun is half done.",
    "Practice does not make perfect. Only perfect practice makes perfect.",
    "The expert in anything was once a beginner.",
    "Quality is not an act, it is a habit.",
    "Slow and steady wins the race, but steady practice makes you fast.",
]

EASY_WORDS = [
    "the", "and", "time", "year", "people", "way", "day", "man", "thing", "woman",
    "life", "child", "world", "school", "state", "family", "student", "group", "country", "problem",
    "hand", "part", "place", "case", "week", "company", "system", "program", "question", "work",
    "number", "night", "point", "home", "water", "room", "mother", "area", "money", "story",
    "fact", "month", "lot", "right", "study", "book", "eye", "job", "word", "business",
    "issue", "side", "kind", "head", "house", "service", "friend", "father", "power", "hour",
]

HARD_WORDS = [
    "acquiesce", "bureaucracy", "conscientious", "dichotomy", "ephemeral", "fluorescent",
    "gregarious", "hierarchy", "idiosyncrasy", "juxtaposition", "kaleidoscope", "labyrinthine",
    "mischievous", "necessitate", "onomatopoeia", "perseverance", "quintessential", "rhythm",
    "surreptitious", "thoroughfare", "ubiquitous", "vicissitude", "whimsical", "xylophone",
    "yacht", "zephyr", "accommodate", "belligerent", "cacophony", "deteriorate",
    "entrepreneur", "fuchsia", "guarantee", "harass", "incandescent", "jeopardize",
    "knowledgeable", "liaison", "millennium", "noticeable",
]

SHORT_DRILL_WORDS = 15
LONG_DRILL_WORDS = 45
