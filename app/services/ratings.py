from app.db.repositories.ratings import get_latest_rating

# Glicko-2 starting values for a player with no rated games
DEFAULT_RATING = 1500.0
DEFAULT_DEVIATION = 350.0
DEFAULT_VOLATILITY = 0.06


def get_current_rating(db, user_id: str) -> dict:
    """Latest rating snapshot for the user, or the default one if never rated."""
    latest = get_latest_rating(db, user_id)
    if latest is None:
        return {
            "rating": DEFAULT_RATING,
            "deviation": DEFAULT_DEVIATION,
            "volatility": DEFAULT_VOLATILITY,
            "created_at": None,
        }

    return {
        "rating": latest.rating,
        "deviation": latest.deviation,
        "volatility": latest.volatility,
        "created_at": latest.created_at.isoformat(),
    }
