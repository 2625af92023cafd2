"""
battery-planner: greedy charge/discharge planning for a grid-limited site battery.
"""

from battery_planner.models.battery import Battery
from battery_planner.models.planning import average_price, plan_battery_usage

__version__ = "0.1.0"

__all__ = ["Battery", "average_price", "plan_battery_usage", "__version__"]
