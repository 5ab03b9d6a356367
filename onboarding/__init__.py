"""
Onboarding identity service.

Registration with email verification, sign-in, account activation and
password recovery over a transactional unit of work.
"""

__version__ = "1.0.0"
