"""
Shared constants used across the application.

This module contains constants that need to be consistent across
different parts of the application (services, routes, CLI, validation).
"""

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Fixed three-month season buckets (Northern Hemisphere calendar)
SEASONS = {
    "spring": (3, 4, 5),
    "summer": (6, 7, 8),
    "fall": (9, 10, 11),
    "winter": (12, 1, 2),
}

# Plant categories (null/missing plant_type means unspecified)
PLANT_TYPES = [
    ('edible', 'Edible'),
    ('invasive', 'Invasive'),
    ('medicinal', 'Medicinal'),
    ('ornamental', 'Ornamental'),
]

# Journal filter buttons: everything, favourites, or one plant type
JOURNAL_FILTERS = ("all", "favorites", "edible", "invasive", "medicinal")

# Level rule: every level spans 100 points
POINTS_PER_LEVEL = 100
