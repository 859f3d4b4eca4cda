"""
Forecast bounded context — infrastructure adapters.

Implements the domain ports: local model process, cloud model endpoint,
prediction result store and anomaly detection.
"""
