"""
Domain layer for the Pix fulfillment webhook.

This layer contains business entities, value objects, and domain logic
following Domain-Driven Design principles.
"""
