# products/signals.py

"""
Inventory signals.

stock_movement_recorded is sent once per committed StockMovement
(after the transaction commits), with kwargs:
- movement: the StockMovement instance
- action: "created"
"""

from django.dispatch import Signal


stock_movement_recorded = Signal()
