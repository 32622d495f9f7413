"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ConfigurationError(DomainException):
    """Commission rules are malformed or leave amounts uncovered"""

    pass


class InvalidAmountError(DomainException):
    """Amount reached the pipeline without being strictly positive"""

    def __init__(self, amount):
        super().__init__(f"Amount must be greater than zero, got {amount}")
        self.amount = amount


class NoMatchingRuleError(DomainException):
    """No loaded rule covers the amount"""

    def __init__(self, amount, rules_signature: str):
        super().__init__(f"No commission rule matches amount {amount}; rules: {rules_signature}")
        self.amount = amount
        self.rules_signature = rules_signature


class StorageError(DomainException):
    """Transaction store failed to insert or read records"""

    pass
