"""Household notification service: durable log, live SSE delivery and client receiver."""
