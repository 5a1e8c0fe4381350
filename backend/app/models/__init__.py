from app.models.voip_integration import VoipIntegration
from app.models.call_event import CallDirection, CallEvent
from app.models.call_metric_daily import CallMetricDaily

__all__ = ["VoipIntegration", "CallDirection", "CallEvent", "CallMetricDaily"]
