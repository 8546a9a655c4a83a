"""ScoutMerge — reconcile independent scouting observations into one record per team per match."""

__version__ = "0.1.0"
