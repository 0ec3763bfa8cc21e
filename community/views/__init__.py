# community/views/__init__.py

# Import all views from the separated files
from .donation_views import *
from .gamification_views import *
from .analytics_views import *
