"""
Forecast bounded context — domain layer.

Contains entities, ports, errors and the pure prediction policies
(payload normalization, anomaly classification, algorithm catalog).
No framework imports allowed.
"""
