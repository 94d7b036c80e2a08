"""Base Pydantic models for esconn.

This module provides the base model class that all esconn Pydantic models inherit from.
It establishes consistent configuration across all models including:

- Strict field validation (no extra fields allowed)
- Immutable instances for thread safety
- Consistent serialization behavior

Example:
    >>> from esconn.models import EsconnBaseModel
    >>>
    >>> class MyModel(EsconnBaseModel):
    ...     name: str
    ...     sensitive: bool = False
    >>>
    >>> MyModel(name="password", sensitive=True).model_dump()
    {'name': 'password', 'sensitive': True}
"""

from pydantic import BaseModel, ConfigDict


class EsconnBaseModel(BaseModel):
    """Base model for all esconn Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable so catalog and graph constants
      can be shared between threads without copying
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
