"""
Order services package for payment reconciliation.

Contains the order state machine, the payload validator and the
webhook reconciler that drives paid orders to fulfillment.
"""
