"""Domain models for the chat service layer.

Re-exports every public symbol so imports like
``from discbot.core.service.models import Message`` work.
"""

from .answer import *  # noqa: F401, F403
from .chunks import *  # noqa: F401, F403
from .constants import *  # noqa: F401, F403
from .errors import *  # noqa: F401, F403
from .events import *  # noqa: F401, F403
from .messages import *  # noqa: F401, F403
