from app.services.charts.configs import ChartConfigService, parse_chart
from app.services.charts.data import ChartDataService, envelope

__all__ = [
    "ChartConfigService",
    "ChartDataService",
    "envelope",
    "parse_chart",
]
