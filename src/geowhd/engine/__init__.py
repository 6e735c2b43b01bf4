"""Office-level filtering, aggregation and derived metrics"""
from geowhd.engine.aggregation import StatisticsEngine

__all__ = ["StatisticsEngine"]
