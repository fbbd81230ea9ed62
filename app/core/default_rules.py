from typing import Any, Dict, List

# Questionnaire every new tenant starts with.  Weights sum to 100 so a
# lead answering the top choice everywhere scores 100.
DEFAULT_SCORING_RULES: List[Dict[str, Any]] = [
    {
        "question": "What is your budget range?",
        "weight": 25,
        "answers": {"Under ₹50k": 20, "₹50k-₹2L": 60, "Above ₹2L": 100},
    },
    {
        "question": "What is your timeline?",
        "weight": 25,
        "answers": {"Immediately": 100, "Within 1 month": 70, "3+ months": 30},
    },
    {
        "question": "Are you the decision maker?",
        "weight": 30,
        "answers": {"Yes": 100, "Influence": 60, "Just researching": 20},
    },
    {
        "question": "How urgent is this requirement?",
        "weight": 20,
        "answers": {"Critical": 100, "Important": 60, "Nice to have": 30},
    },
]

DEFAULT_ROUTING_RULES: List[Dict[str, Any]] = [
    {
        "category": "hot",
        "method": "skill_based",
        "notify": True,
        "settings": {"priority": "high"},
    },
    {"category": "warm", "method": "round_robin", "notify": False, "settings": {}},
    {"category": "cold", "method": "automation", "notify": False, "settings": {}},
]
