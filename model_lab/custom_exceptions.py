# model_lab/custom_exceptions.py
class InvalidStepIndexError(ValueError):
    """Raised when a workflow step outside 1..6 is requested."""
    pass

class UnknownModelFamilyError(ValueError):
    """Raised when a model family name is not ARIMA, SARIMA or SARIMAX."""
    pass

class UnknownFieldError(KeyError):
    """Raised when a series has no column for the requested field."""
    pass

class ModelNotFoundError(Exception):
    """Raised when a model candidate for a given family is not in the comparison table."""
    pass
