from app.repositories.charts.chart import ChartRepository

__all__ = ["ChartRepository"]
