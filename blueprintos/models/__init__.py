from blueprintos.db.base_class import Base
from blueprintos.models.workspace import Workspace
from blueprintos.models.profile import Profile
from blueprintos.models.pricing_tier import PricingTier
from blueprintos.models.testimonial import Testimonial
from blueprintos.models.landing_page_prompt import LandingPagePrompt
from blueprintos.models.subscription import WorkspaceSubscription, WorkspaceFeatures
