"""
API package containing the JSON routes.

``v1`` exposes a top-level ``router`` which includes the event and
booking endpoints.
"""
