from .api import TablesideApi, TablesideClientError, api_from_settings
from .dashboard import DashboardFeed, RequestSequencer, open_dashboard_feed
from .diner import DinerSession, open_diner_session
