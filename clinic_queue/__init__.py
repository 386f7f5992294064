"""
Clinic Queue Backend

A FastAPI service for clinic appointments, doctors and medical records,
with per-doctor walk-in queue token issuance.
"""

__version__ = "1.0.0"
