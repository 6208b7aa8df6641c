MONITOR_TYPES = ("future", "all", "none", "latest", "first")


def apply_monitor_policy(payload, seasons, monitor_type):
    """
    Fill ``payload`` (the add-series request) for the chosen monitor type.

    ``seasons`` is the lookup result's season list; each entry gets its
    ``monitored`` flag set in place for the season based types. Season 0
    (specials) is ignored when finding the first and last season but is
    flagged like any other season.
    """
    if monitor_type not in MONITOR_TYPES:
        raise ValueError(f"unknown monitor type {monitor_type}")

    if monitor_type == "future":
        payload["addOptions"] = {
            "ignoreEpisodesWithFiles": True,
            "ignoreEpisodesWithoutFiles": True,
        }
    elif monitor_type == "all":
        payload["addOptions"] = {
            "ignoreEpisodesWithFiles": False,
            "ignoreEpisodesWithoutFiles": False,
        }
    else:
        numbers = [s["seasonNumber"] for s in seasons if s["seasonNumber"] != 0]
        last_season = max(numbers, default=0)

        if monitor_type == "latest":
            threshold = last_season
        else:
            # none / first: only seasons beyond the current last one
            threshold = last_season + 1

        for season in seasons:
            season["monitored"] = season["seasonNumber"] >= threshold

        if monitor_type == "first" and numbers:
            first_season = min(numbers)
            for season in seasons:
                if season["seasonNumber"] == first_season:
                    season["monitored"] = not season["monitored"]

    payload["seasons"] = seasons
    return payload
