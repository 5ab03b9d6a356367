"""
Persistence gateway: transactional access to users and verification tokens.
"""

from onboarding.kernel.persistence.unit_of_work import Transaction, UnitOfWork

__all__ = [
    "Transaction",
    "UnitOfWork",
]
