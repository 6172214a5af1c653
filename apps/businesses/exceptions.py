"""
Business action errors.
"""


class InvalidBusinessOperation(ValueError):
    """
    Raised when an action's precondition fails (e.g. removing the owner,
    assigning the owner role, switching to a business without membership).

    Always raised before any write happens.
    """
