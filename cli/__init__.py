"""Command line entry points for the sensor sender, receiver and status queries."""
