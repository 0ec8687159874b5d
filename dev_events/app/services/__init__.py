"""
Service layer.

Each service encapsulates the business logic for one domain and takes
its stores as arguments, so handlers and tests decide which store
instances are used.
"""
