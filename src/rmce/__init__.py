"""RMCE route tracking and challenge API."""
