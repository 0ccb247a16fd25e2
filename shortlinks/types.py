from typing import Any
from collections.abc import Callable


# API Gateway (Lambda Proxy) payloads
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type LambdaHandler = Callable[[LambdaEvent, LambdaContext], LambdaResponse]

# AppConfig documents
type AppConfig = dict[str, Any]  # the whole deployed JSON document
type LambdaConfiguration = dict[str, Any]  # {<active backend>: {...}, 'shortcode': {...}}
type BackendSettings = dict[str, Any]  # one backend's section, e.g. {'host': 'redis', 'port': 6379}
