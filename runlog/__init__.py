"""runlog: personal running log with Strava import."""

__version__ = "0.1.0"
