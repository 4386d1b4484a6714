"""Domain business rules and constants."""

from typing import Final

# Business Rules - Core domain constraints
MAX_TITLE_LENGTH: Final = 255
MAX_NAME_LENGTH: Final = 255
MAX_LOCATION_LENGTH: Final = 255

# Largest id the events.id INTEGER column can hold
MAX_EVENT_ID: Final = 2**31 - 1
