"""
Forecast bounded context — application layer.

Orchestrates backends, normalization, anomaly policy and persistence.
"""
