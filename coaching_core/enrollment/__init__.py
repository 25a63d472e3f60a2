"""
Enrollment Module

Learner login by phone number and batch enrollment.
"""

from .ledger import EnrollmentLedger
from .models import User

__all__ = ["EnrollmentLedger", "User"]
