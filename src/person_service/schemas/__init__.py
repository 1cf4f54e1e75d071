from .person import PersonCreate, PersonRead
from .error import ErrorResponse

__all__ = ["PersonCreate", "PersonRead", "ErrorResponse"]
