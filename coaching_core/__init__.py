"""
Coaching platform backend: institutes, batches with nested content trees, and learner enrollment.
"""
