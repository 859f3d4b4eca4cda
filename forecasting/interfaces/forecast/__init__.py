"""Forecast bounded context — HTTP interface (routers, schemas, wiring)."""
