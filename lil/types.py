from typing import Any, TypeAlias


# Type aliases for API Gateway style handler payloads
HandlerEvent: TypeAlias = dict[str, Any]
HandlerContext: TypeAlias = Any
HandlerResponse: TypeAlias = dict[str, Any]
ConfigDocument: TypeAlias = dict[str, Any]
