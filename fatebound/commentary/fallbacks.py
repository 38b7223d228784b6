"""Local flavor text used when generated text is unavailable."""

FALLBACK_COMMENTARY = [
    "A devastating blow shakes the arena!",
    "The magical energy intensifies!",
    "A strategic masterstroke!",
    "The very ground trembles from that attack!",
    "Power surges through the battlefield!",
    "An unexpected turn of events!",
    "The crowd roars in anticipation!",
    "Pure skill on display!",
]

FALLBACK_TIPS = [
    "Save your high-cost cards for a decisive turn.",
    "Don't forget to use your Champion's ability if you have spare Mana.",
    "Control the board by removing enemy minions early.",
    "Sometimes it's better to wait than to play a card just because you can.",
    "Watch your health - don't let it drop too low!",
    "Combine spell effects for maximum impact.",
]
