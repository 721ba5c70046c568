import os
import warnings

# Ignore warnings from beanie internals
warnings.filterwarnings("ignore", category=DeprecationWarning, module="beanie.*")

# Keep the fan-out in process during tests
os.environ.setdefault("EVENT_BUS_BACKEND", "memory")

# Import fixtures so they are available to all tests
from tests.fixtures.api_fixtures import *  # noqa: E402, F403
from tests.fixtures.event_fixtures import *  # noqa: E402, F403
from tests.fixtures.live_fixtures import *  # noqa: E402, F403
from tests.fixtures.mongo_fixtures import *  # noqa: E402, F403
