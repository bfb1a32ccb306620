"""Notifications app.

Accepts notification requests over HTTP, queues them in Redis and runs
the background worker that delivers them and records their status.
"""
