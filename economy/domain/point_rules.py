"""Engagement point values

Point amounts awarded for platform activity. These event types are also
the ones that build reputation and drive badge progress.
"""

POINT_VALUES: dict[str, int] = {
    "SWAP_VERIFIED": 50,       # Completed a verified book swap
    "ON_TIME_DELIVERY": 25,    # Swap delivered on time
    "PITCH_SELECTED": 100,     # Pitch chosen by a club poll
    "VOTE_CAST": 3,            # Voted in a club poll
    "REVIEW_VERIFIED": 10,     # Verified book review
    "SOCIAL_SHARE": 5,         # Shared content
    "HOST_ACTION": 15,         # Hosted club activity
    "PITCH_CREATED": 10,       # Published a pitch
    "MESSAGE_POSTED": 1,       # Posted a club room message
    "CLUB_JOINED": 5,          # Joined a club
    "CLUB_CREATED": 15,        # Created a club
    "POLL_CLOSED": 15,         # Closed a poll as host
}

ENGAGEMENT_EVENT_TYPES = frozenset(POINT_VALUES)


def points_for(event_type: str) -> int | None:
    """Return the default award for event_type, or None if unknown"""
    return POINT_VALUES.get(event_type.upper())
