"""Top navigation bar entries."""

NAV_ITEMS = [
    ("/", "Dashboard"),
    ("/exercises", "Exercises"),
    ("/workouts", "Workouts"),
    ("/videos", "Videos"),
    ("/categories", "Categories"),
    ("/users", "Users"),
]


def is_active(href: str, path: str) -> bool:
    """An entry is active on its own page and on every page beneath it."""
    return path == href or path.startswith(href + "/")


def nav_items(path: str) -> list[dict]:
    return [
        {"href": href, "label": label, "active": is_active(href, path)}
        for href, label in NAV_ITEMS
    ]
