"""Default rule table used to seed a fresh condition store."""

DEFAULT_CONDITIONS = [
    {
        "type": "attendance",
        "rules": [
            {"key": "attend", "points": 10},
            {"key": "absent", "points": -5},
        ],
    },
    {
        "type": "homework",
        "withDegree": True,
        "rules": [
            {"min": 100, "max": 100, "points": 20},
            {"min": 75, "max": 99, "points": 15},
            {"min": 50, "max": 74, "points": 10},
            {"min": 1, "max": 49, "points": 5},
            {"min": 0, "max": 0, "points": -20},
        ],
        "bonusRules": [
            {"key": "four_100_hw_streak", "condition": {"lastN": 4, "percentage": 100}, "points": 25},
        ],
    },
    {
        "type": "homework",
        "withDegree": False,
        "rules": [
            {"hwDone": True, "points": 20},
            {"hwDone": "Not Completed", "points": 10},
            {"hwDone": False, "points": -20},
        ],
    },
    {
        "type": "quiz",
        "rules": [
            {"min": 100, "max": 100, "points": 25},
            {"min": 75, "max": 99, "points": 20},
            {"min": 50, "max": 74, "points": 15},
            {"min": 20, "max": 49, "points": 10},
            {"min": 1, "max": 19, "points": 5},
            {"min": 0, "max": 0, "points": -25},
        ],
        "bonusRules": [
            {"key": "four_100_streak", "condition": {"lastN": 4, "percentage": 100}, "points": 30},
        ],
    },
]
