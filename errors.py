"""
Calculator errors
"""


class InvalidInputError(ValueError):
    """Calculator input failed validation; the message is user-facing"""
