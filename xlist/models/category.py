"""Fixed category set profiles classify into."""

ALL_CATEGORIES = "All"

CATEGORIES: tuple[str, ...] = (
    "Technology",
    "Design",
    "Marketing",
    "Business",
    "Content Creator",
    "Developer",
    "Entrepreneur",
    "Artist",
    "Writer",
    "Journalist",
    "Photographer",
    "Musician",
    "Gamer",
    "Sports",
    "Fashion",
    "Food",
    "Travel",
    "Fitness",
    "Education",
    "Science",
    "Healthcare",
    "Finance",
    "Real Estate",
    "Crypto",
    "AI",
    "Startup",
    "Consulting",
    "Legal",
    "Nonprofit",
    "Government",
    "Other",
)


def is_valid_category(value: str | None) -> bool:
    """Check a value against the category set (the "All" sentinel is not a category)."""
    return value in CATEGORIES
