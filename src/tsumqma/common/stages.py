"""Stage identifiers known to every player profile."""

DEFAULT_STAGE_ID = "ai"

# Every new profile tracks these stages, even before their assets are played.
DEFAULT_STAGE_IDS: tuple[str, ...] = (
    "ai",
    "writing",
    "design",
    "marketing",
    "coding",
    "other",
)

INITIAL_MAX_EXP = 100
