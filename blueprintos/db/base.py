# Import all the models, so that Base has them before being
# imported by create_all / the test fixtures
from blueprintos.db.base_class import Base  # noqa: F401
from blueprintos.models import *  # noqa: F401,F403
