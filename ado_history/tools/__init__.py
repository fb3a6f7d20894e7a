"""Auto-import all tool modules to register them."""
# Import all tool modules - they will auto-register with the global mcp instance
from . import changesets  # noqa: F401
from . import results  # noqa: F401
