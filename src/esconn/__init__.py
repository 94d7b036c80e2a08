"""esconn - Elasticsearch connection block model.

Declares the fields of an Elasticsearch connection block, the rules between
them and the scope-dependent defaults, once, so that every descriptor built
from it enforces the same configuration surface.

## Quick Example

```python
from esconn import Scope, build_effective_model, load_connection

model = build_effective_model(Scope.RESOURCE)
assert model.field("username").requires == ("password",)

settings = load_connection({"api_key": "..."}, Scope.PROVIDER)
# settings["insecure"] is False unless ELASTICSEARCH_INSECURE says otherwise
```
"""

from esconn.errors import (
    ConnectionConfigError,
    ConnectionValidationError,
    ConstraintGraphError,
    EsconnError,
)
from esconn.schema import (
    EffectiveModel,
    Scope,
    build_effective_model,
    load_connection,
    resolve,
    validate_connection,
)
from esconn.version import PACKAGE_NAME, PACKAGE_VERSION

__all__ = [
    "EsconnError",
    "ConstraintGraphError",
    "ConnectionConfigError",
    "ConnectionValidationError",
    "EffectiveModel",
    "Scope",
    "build_effective_model",
    "load_connection",
    "resolve",
    "validate_connection",
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
]
