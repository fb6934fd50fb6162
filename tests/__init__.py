"""
Test suite for the Clinic Scheduler.

Contains unit tests for the scheduling rules and integration tests for the
booking services and HTTP endpoints.
"""
