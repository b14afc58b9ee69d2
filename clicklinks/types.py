from datetime import datetime
from typing import Any
from collections.abc import Callable


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type LambdaConfiguration = dict[str, Any]

# Injectable collaborators of the short link services
type Clock = Callable[[], datetime]
type ShortcodeGenerator = Callable[[], str]
