"""IssueLane — helpdesk ticket and task tracking desktop client."""

__version__ = "0.3.0"
