"""
Clinic Queue: token-based patient queue for small clinics

Books patients into per-doctor daily queues, derives live queue positions,
tracks visit and doctor status, and keeps an append-only activity log of
staff actions.
"""

__version__ = "0.1.0"
__author__ = "Clinic Queue Team"
__description__ = "Token-based clinic queue service"
