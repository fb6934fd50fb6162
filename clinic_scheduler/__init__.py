"""
Clinic Scheduler

A FastAPI-based service that derives bookable appointment slots from
layered doctor availability rules and validates bookings against them.
"""

__version__ = "1.0.0"
