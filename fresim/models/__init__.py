"""Rating and fire spread models for FRESIM.

Modules:
    - rating_tables: Piecewise-linear rating tables and the packaged ACI 216.1 data.
    - rating_calculator: Element properties to fire-resistance rating in hours.
    - fire_spread: Stochastic element-to-element fire spread.
"""
