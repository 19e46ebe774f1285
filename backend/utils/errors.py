# backend/utils/errors.py

# Base class for failures raised by the service layer; carries the HTTP status
class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Malformed or missing input, or a business rule the input violates
class ValidationError(ServiceError):
    status_code = 400


# Referenced entity does not exist
class NotFoundError(ServiceError):
    status_code = 404


# Write conflicts with current state (duplicate key, stock exhausted, usage cap)
class ConflictError(ServiceError):
    status_code = 409


# Unexpected database failure; the message shown to clients stays generic
class PersistenceError(ServiceError):
    status_code = 500

    def __init__(self, message: str = "Operation failed"):
        super().__init__(message)
