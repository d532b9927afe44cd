"""
Demo data loaded at startup when ``seed_demo_data`` is enabled.
"""

DEMO_ACTIVATION_CODES = ("SPORTPRO123", "WINNER456", "PREDICT789")

# (match, league, prediction, multiplier, time, status)
DEMO_PREDICTIONS = (
    ("Manchester City vs Liverpool", "Premier League", "Over 2.5", "1.8x", "20:45", "Live"),
    ("Real Madrid vs Barcelona", "La Liga", "BTTS", "1.95x", "21:00", "Upcoming"),
    ("Lakers vs Warriors", "NBA", "Warriors +3.5", "1.75x", "03:30", "Live"),
    ("Djokovic vs Nadal", "ATP Finals", "Nadal Win", "2.1x", "16:00", "Tomorrow"),
    ("Arsenal vs Tottenham", "Premier League", "Arsenal Win", "1.9x", "17:30", "Tomorrow"),
    ("PSG vs Marseille", "Ligue 1", "Over 3.5", "2.2x", "20:00", "Upcoming"),
    ("Bucks vs Celtics", "NBA", "Bucks -4.5", "1.85x", "01:00", "Tomorrow"),
    ("Bayern Munich vs Dortmund", "Bundesliga", "Both Teams to Score", "1.7x", "18:30", "Upcoming"),
)
