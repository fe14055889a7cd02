"""jjstack - keep stack navigation blocks in stacked pull request descriptions."""

__version__ = "0.3.0"
