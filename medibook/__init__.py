"""
MediBook

A FastAPI-based backend for booking medical appointments, with doctor and
patient accounts, availability management and email notifications.
"""

__version__ = "1.0.0"
